"""Practice session endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from topik_practice.dependencies import get_app_state
from topik_practice.models import AdvanceRequest, AnswerSubmission, SessionSetupRequest
from topik_practice.state import AppState

router = APIRouter(prefix="/api/session", tags=["session"])


def _session_payload(state: AppState) -> dict[str, object]:
    payload = state.session.view()
    payload["results"] = (
        state.session.results().to_payload() if state.session.completed else None
    )
    return payload


@router.post("")
def setup_session(
    request: SessionSetupRequest,
    state: Annotated[AppState, Depends(get_app_state)],
) -> dict[str, object]:
    """Start a new session, replacing the current one."""
    with state.lock:
        state.session.setup(
            request.mode,
            level=request.level,
            year=request.year,
            category=request.category,
        )
        return _session_payload(state)


@router.get("")
def get_session(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Get the current session (applies any countdown ticks owed)."""
    with state.lock:
        state.session.sync()
        return _session_payload(state)


@router.post("/answers")
def submit_answer(
    submission: AnswerSubmission,
    state: Annotated[AppState, Depends(get_app_state)],
) -> dict[str, object]:
    """Record an answer for one question."""
    with state.lock:
        state.session.sync()
        state.session.submit_answer(submission.questionId, submission.optionIndex)
        return _session_payload(state)


@router.post("/advance")
def advance(
    request: AdvanceRequest,
    state: Annotated[AppState, Depends(get_app_state)],
) -> dict[str, object]:
    """Move to the next or previous question."""
    with state.lock:
        state.session.sync()
        state.session.advance(request.step)
        return _session_payload(state)


@router.post("/finish")
def finish(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Finish the session and score it."""
    with state.lock:
        state.session.sync()
        results = state.session.finish()
        return {
            **results.to_payload(),
            "persisted": state.wrong_answers.persisted,
        }


@router.get("/results")
def get_results(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Get the results of the finished session."""
    with state.lock:
        state.session.sync()
        return state.session.results().to_payload()
