"""Engine exceptions."""


class PracticeError(Exception):
    """Base class for practice engine errors."""


class InvalidFormat(PracticeError):
    """Imported data is not a question bank."""


class DuplicateQuestionId(PracticeError):
    """A manually added question reuses an id already present in its bucket."""

    def __init__(self, question_id: str) -> None:
        super().__init__(f"Question {question_id} already exists")
        self.question_id = question_id


class SessionStateError(PracticeError):
    """Operation is not allowed in the current session state."""


class StorageError(PracticeError):
    """Key-value store could not read or write a value."""
