"""Application state dependency for FastAPI."""
from fastapi import HTTPException, Request, status

from topik_practice.state import AppState


def get_app_state(request: Request) -> AppState:
    """Get the AppState attached to the running app.

    Raises:
        HTTPException: 503 if the app has not finished starting.
    """
    state = getattr(request.app.state, "practice", None)
    if state is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Practice state not initialized",
        )
    return state
