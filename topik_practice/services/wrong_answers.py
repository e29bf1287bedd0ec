"""Persisted set of previously missed questions."""
import copy
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from topik_practice.config import WRONG_ANSWERS_KEY
from topik_practice.errors import StorageError
from topik_practice.services.storage import KeyValueStore, write_through
from topik_practice.utils import json_dump, json_load

logger = logging.getLogger(__name__)


def is_graded(question: Mapping[str, Any]) -> bool:
    """Graded questions have a definite correct option index."""
    return question.get("answer") is not None


def is_miss(question: Mapping[str, Any], answers: Mapping[str, int]) -> bool:
    """A graded question answered wrongly or not at all."""
    return is_graded(question) and answers.get(question.get("id")) != question.get("answer")


class WrongAnswerSet:
    """Ordered questions, unique by id. Grows until explicitly cleared."""

    def __init__(
        self,
        questions: list[dict[str, Any]] | None = None,
        store: KeyValueStore | None = None,
        key: str = WRONG_ANSWERS_KEY,
    ) -> None:
        self.questions: list[dict[str, Any]] = list(questions or [])
        self.store = store
        self.key = key
        self.persisted = True

    @classmethod
    def load(cls, store: KeyValueStore, key: str = WRONG_ANSWERS_KEY) -> "WrongAnswerSet":
        try:
            raw = store.load(key)
        except StorageError as e:
            logger.error(f"Failed to load wrong answers: {e}")
            raw = None

        questions: list[dict[str, Any]] = []
        if raw is not None:
            try:
                data = json_load(raw)
            except ValueError as e:
                logger.error(f"Saved wrong answers are not valid JSON: {e}")
                data = []
            if isinstance(data, list):
                questions = [q for q in data if isinstance(q, dict)]
        return cls(questions, store, key)

    def __len__(self) -> int:
        return len(self.questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self.ids()

    def ids(self) -> set[str]:
        return {q.get("id") for q in self.questions}

    def snapshot(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self.questions)

    def save(self) -> bool:
        if self.store is None:
            return True
        self.persisted = write_through(
            self.store, self.key, json_dump(self.questions).encode("utf-8")
        )
        return self.persisted

    def record_misses(
        self,
        session_questions: Iterable[Mapping[str, Any]],
        answers: Mapping[str, int],
    ) -> list[dict[str, Any]]:
        """
        Append missed graded questions that are not already in the set.

        Returns the newly appended questions, in session order.
        """
        known = self.ids()
        added: list[dict[str, Any]] = []
        for question in session_questions:
            if not is_miss(question, answers):
                continue
            question_id = question.get("id")
            if question_id in known:
                continue
            known.add(question_id)
            added.append(copy.deepcopy(dict(question)))

        if added:
            self.questions.extend(added)
            logger.info("Recorded %d new wrong answers", len(added))
            self.save()
        return added

    def clear(self) -> None:
        self.questions = []
        logger.info("Wrong answers cleared")
        self.save()
