"""Question bank endpoints."""
import copy
from typing import Annotated

from fastapi import APIRouter, Body, Depends, File, HTTPException, Query, Request, Response, UploadFile
from pydantic import ValidationError

from topik_practice.config import LEVELS
from topik_practice.dependencies import get_app_state
from topik_practice.models import parse_question
from topik_practice.models.sessions import Category
from topik_practice.models.questions import Level
from topik_practice.services.import_service import export_bank, export_filename, import_bank
from topik_practice.services.question_bank import suggest_question_id
from topik_practice.state import AppState

router = APIRouter(prefix="/api/bank", tags=["bank"])


@router.get("")
def get_bank(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Get the full question bank."""
    with state.lock:
        return copy.deepcopy(state.bank.data)


@router.delete("")
def clear_bank(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Reset the bank to an empty shell."""
    with state.lock:
        state.bank.clear()
        return {"status": "cleared", "persisted": state.bank.persisted}


@router.get("/statistics")
def bank_statistics(state: Annotated[AppState, Depends(get_app_state)]) -> dict[str, object]:
    """Question and year counts per level, plus bucket sizes."""
    with state.lock:
        return {
            "levels": state.bank.statistics(),
            "structure": state.bank.structure(),
        }


@router.get("/years/{level}")
def list_years(
    level: str,
    state: Annotated[AppState, Depends(get_app_state)],
) -> list[str]:
    """List years available for a level."""
    if level not in LEVELS:
        raise HTTPException(status_code=404, detail="Unknown level")
    with state.lock:
        return state.bank.years(level)


@router.get("/questions/suggest-id")
def suggest_id(
    year: str = Query(..., min_length=1),
    category: Category = Query("listening", alias="type"),
    level: Level = Query("topik1"),
) -> dict[str, str]:
    """Suggest an id for a new question."""
    return {"id": suggest_question_id(year, category, level)}


@router.post("/questions")
def add_question(
    state: Annotated[AppState, Depends(get_app_state)],
    payload: dict[str, object] = Body(...),
    overwrite: bool = Query(False),
) -> dict[str, object]:
    """Add a question, or replace one with the same id when ``overwrite`` is set.

    A duplicate id without ``overwrite`` answers 409 so the client can ask
    the user and retry.
    """
    try:
        question = parse_question(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    with state.lock:
        result = state.bank.upsert(question, overwrite=overwrite)
        return {
            "result": result.value,
            "question": question.to_record(),
            "persisted": state.bank.persisted,
        }


@router.post("/import")
async def import_questions(
    request: Request,
    state: Annotated[AppState, Depends(get_app_state)],
) -> dict[str, object]:
    """Merge a JSON question bank from the request body into the current one."""
    raw = await request.body()
    with state.lock:
        result = import_bank(raw, state.bank)
        return {
            "addedCount": result.added_count,
            "statistics": state.bank.statistics(),
            "persisted": state.bank.persisted,
        }


@router.post("/import/file")
def import_questions_file(
    state: Annotated[AppState, Depends(get_app_state)],
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Merge an uploaded JSON file into the current bank."""
    raw = file.file.read()
    with state.lock:
        result = import_bank(raw, state.bank)
        return {
            "addedCount": result.added_count,
            "statistics": state.bank.statistics(),
            "persisted": state.bank.persisted,
        }


@router.get("/export")
def export_questions(state: Annotated[AppState, Depends(get_app_state)]) -> Response:
    """Download the full bank as JSON."""
    with state.lock:
        content = export_bank(state.bank)
    filename = export_filename()
    return Response(
        content=content.encode("utf-8"),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
