"""Session-related Pydantic models."""
from typing import Literal

from pydantic import BaseModel, Field

from topik_practice.models.questions import Level

Mode = Literal["regular", "mock", "wrong-review"]
Category = Literal["listening", "reading", "writing"]


class SessionSetupRequest(BaseModel):
    """Model for starting a practice session."""

    mode: Mode = "regular"
    level: Level = "topik1"
    year: str = "2023"
    category: Category = "listening"


class AnswerSubmission(BaseModel):
    """Model for answering one question."""

    questionId: str = Field(..., min_length=1)
    optionIndex: int


class AdvanceRequest(BaseModel):
    """Model for moving the cursor."""

    step: Literal[-1, 1] = 1
