"""Wrong-answer set endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from topik_practice.dependencies import get_app_state
from topik_practice.state import AppState

router = APIRouter(prefix="/api/wrong-answers", tags=["wrong-answers"])


@router.get("")
def list_wrong_answers(
    state: Annotated[AppState, Depends(get_app_state)],
) -> list[dict[str, object]]:
    with state.lock:
        state.session.sync()
        return state.wrong_answers.snapshot()


@router.delete("")
def clear_wrong_answers(
    state: Annotated[AppState, Depends(get_app_state)],
) -> dict[str, object]:
    with state.lock:
        state.session.sync()
        state.wrong_answers.clear()
        return {"status": "cleared", "persisted": state.wrong_answers.persisted}
