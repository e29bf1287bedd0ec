"""Statistics endpoints."""
from typing import Annotated

from fastapi import APIRouter, Depends

from topik_practice.dependencies import get_app_state
from topik_practice.services.stats_service import build_learning_summary
from topik_practice.state import AppState

router = APIRouter(prefix="/api", tags=["statistics"])


@router.get("/stats")
def learning_stats(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Bank size, wrong-answer count, overall accuracy and weak categories."""
    with state.lock:
        state.session.sync()
        return build_learning_summary(state.bank, state.wrong_answers)
