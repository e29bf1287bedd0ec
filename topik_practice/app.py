"""Main FastAPI application."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from topik_practice.config import LOG_LEVEL
from topik_practice.errors import (
    DuplicateQuestionId,
    InvalidFormat,
    PracticeError,
    SessionStateError,
)
from topik_practice.logging_setup import setup_console_logging
from topik_practice.routes import bank, sessions, statistics, wrong_answers
from topik_practice.state import AppState, create_app_state

ERROR_STATUS = {
    InvalidFormat: 400,
    DuplicateQuestionId: 409,
    SessionStateError: 409,
}


def _error_response(request: Request, exc: PracticeError) -> JSONResponse:
    status_code = next(
        (code for error, code in ERROR_STATUS.items() if isinstance(exc, error)),
        500,
    )
    content: dict[str, object] = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, DuplicateQuestionId):
        content["questionId"] = exc.question_id
    return JSONResponse(status_code=status_code, content=content)


def create_app(state: AppState | None = None) -> FastAPI:
    """Build the API. Without ``state`` it is restored from storage on startup."""
    app = FastAPI(title="TOPIK Practice API")

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.practice = state
    app.add_exception_handler(PracticeError, _error_response)

    @app.on_event("startup")
    def startup_events() -> None:
        """Restore bank and wrong answers on startup."""
        if app.state.practice is None:
            app.state.practice = create_app_state()

    app.include_router(bank.router)
    app.include_router(sessions.router)
    app.include_router(wrong_answers.router)
    app.include_router(statistics.router)
    return app


setup_console_logging(LOG_LEVEL)

app = create_app()
