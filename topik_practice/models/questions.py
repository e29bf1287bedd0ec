"""Question models for manual entry.

Each question type only declares the fields it uses. Imported questions skip
this validation and are stored exactly as supplied.
"""
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

Level = Literal["topik1", "topik2"]


class QuestionBase(BaseModel):
    """Fields shared by every question type."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    level: Level
    part: int = Field(1, ge=1)
    question: str = Field(..., min_length=1)
    content: str | None = None
    explanation: str | None = None

    @field_validator("id", "year", "question")
    @classmethod
    def strip_blank(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned

    def to_record(self) -> dict[str, Any]:
        """Dump to the JSON shape stored in the bank."""
        return self.model_dump(by_alias=True)


class ChoiceQuestion(QuestionBase):
    """Multiple-choice question with an optional correct option index."""

    options: list[str] = Field(..., min_length=2, max_length=6)
    answer: int | None = None

    @model_validator(mode="after")
    def answer_in_range(self) -> "ChoiceQuestion":
        if self.answer is not None and not 0 <= self.answer < len(self.options):
            raise ValueError(
                f"answer {self.answer} is not an index into {len(self.options)} options"
            )
        return self


class ListeningQuestion(ChoiceQuestion):
    type: Literal["listening"] = "listening"
    audio_url: str | None = Field(None, alias="audioUrl")


class ReadingQuestion(ChoiceQuestion):
    type: Literal["reading"] = "reading"


class WritingQuestion(QuestionBase):
    """Essay question. Never graded."""

    type: Literal["writing"] = "writing"
    image_url: str | None = Field(None, alias="imageUrl")
    answer: None = None

    @field_validator("answer", mode="before")
    @classmethod
    def writing_is_ungraded(cls, value: object) -> None:
        return None


Question = Annotated[
    Union[ListeningQuestion, ReadingQuestion, WritingQuestion],
    Field(discriminator="type"),
]

_question_adapter = TypeAdapter(Question)


def parse_question(data: dict[str, Any]) -> ListeningQuestion | ReadingQuestion | WritingQuestion:
    """Validate raw question data into its typed variant."""
    return _question_adapter.validate_python(data)
