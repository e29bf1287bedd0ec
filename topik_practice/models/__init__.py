"""Pydantic models."""
from topik_practice.models.questions import (
    ListeningQuestion,
    Question,
    ReadingQuestion,
    WritingQuestion,
    parse_question,
)
from topik_practice.models.sessions import (
    AdvanceRequest,
    AnswerSubmission,
    SessionSetupRequest,
)

__all__ = [
    "AdvanceRequest",
    "AnswerSubmission",
    "ListeningQuestion",
    "Question",
    "ReadingQuestion",
    "SessionSetupRequest",
    "WritingQuestion",
    "parse_question",
]
