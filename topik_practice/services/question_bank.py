"""Hierarchical question bank: level -> year -> category -> questions."""
import copy
import enum
import logging
import random
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from topik_practice.config import (
    CATEGORIES,
    DEFAULT_BANK_PATH,
    LEVELS,
    QUESTION_BANK_KEY,
)
from topik_practice.errors import DuplicateQuestionId, StorageError
from topik_practice.models.questions import QuestionBase
from topik_practice.services.storage import KeyValueStore, write_through
from topik_practice.utils import json_dump, json_load, read_json_file

logger = logging.getLogger(__name__)

BankData = dict[str, dict[str, dict[str, list[dict[str, Any]]]]]


class UpsertResult(str, enum.Enum):
    """Outcome of adding a single question."""

    ADDED = "added"
    REPLACED = "replaced"
    NOT_APPLIED = "not_applied"


def empty_bank() -> BankData:
    """Bank shell with both levels and no years."""
    return {level: {} for level in LEVELS}


def count_questions(partial: BankData) -> int:
    """Sum the leaf list lengths of a (partial) bank."""
    return sum(
        len(questions)
        for years in partial.values()
        for categories in years.values()
        for questions in categories.values()
    )


def suggest_question_id(year: str, category: str, level: str) -> str:
    """Suggest an id like ``2024-l1-07`` for manual entry."""
    suffix = f"{random.randint(0, 99):02d}"
    return f"{year}-{category[:1]}{level[-1:]}-{suffix}"


class QuestionBank:
    """Question store with write-through persistence.

    Questions are kept in their JSON shape so imported data round-trips
    unchanged.
    """

    def __init__(
        self,
        data: BankData | None = None,
        store: KeyValueStore | None = None,
        key: str = QUESTION_BANK_KEY,
    ) -> None:
        self.data: BankData = data if data is not None else empty_bank()
        self.store = store
        self.key = key
        self.persisted = True

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        default_path: Path = DEFAULT_BANK_PATH,
        key: str = QUESTION_BANK_KEY,
    ) -> "QuestionBank":
        """Restore the persisted bank, falling back to the bundled default."""
        try:
            raw = store.load(key)
        except StorageError as e:
            logger.error(f"Failed to load saved question bank: {e}")
            raw = None

        if raw is not None:
            try:
                data = json_load(raw)
            except ValueError as e:
                logger.error(f"Saved question bank is not valid JSON: {e}")
                data = None
            if isinstance(data, dict):
                logger.info("Loaded saved question bank (%d questions)", count_questions(data))
                return cls(data, store, key)

        data = read_json_file(default_path, empty_bank())
        if not isinstance(data, dict):
            data = empty_bank()
        logger.info("Loaded default question bank (%d questions)", count_questions(data))
        return cls(data, store, key)

    def save(self) -> bool:
        """Write the whole bank through to the store."""
        if self.store is None:
            return True
        self.persisted = write_through(
            self.store, self.key, json_dump(self.data).encode("utf-8")
        )
        return self.persisted

    # Lookup

    def years(self, level: str) -> list[str]:
        return list(self.data.get(level, {}).keys())

    def year_buckets(self, level: str, year: str) -> dict[str, list[dict[str, Any]]]:
        return self.data.get(level, {}).get(year, {})

    def bucket(self, level: str, year: str, category: str) -> list[dict[str, Any]]:
        return self.year_buckets(level, year).get(category, [])

    def iter_questions(self) -> Iterator[dict[str, Any]]:
        for years in self.data.values():
            for categories in years.values():
                for questions in categories.values():
                    yield from questions

    def find(self, question_id: str) -> dict[str, Any] | None:
        return next(
            (q for q in self.iter_questions() if isinstance(q, dict) and q.get("id") == question_id),
            None,
        )

    def total_questions(self) -> int:
        return count_questions(self.data)

    # Mutation

    def upsert(
        self,
        question: QuestionBase,
        confirm: Callable[[dict[str, Any]], bool] | None = None,
        overwrite: bool = False,
    ) -> UpsertResult:
        """
        Add a question to the bucket matching its own level, year and type.

        An existing question with the same id in that bucket is replaced in
        place when ``overwrite`` is set or ``confirm(existing)`` agrees.
        Without either, the duplicate raises DuplicateQuestionId.
        """
        record = question.to_record()
        bucket = (
            self.data.setdefault(record["level"], {})
            .setdefault(record["year"], {})
            .setdefault(record["type"], [])
        )

        index = next(
            (i for i, q in enumerate(bucket) if isinstance(q, dict) and q.get("id") == record["id"]),
            None,
        )
        if index is None:
            bucket.append(record)
            result = UpsertResult.ADDED
        else:
            if not overwrite:
                if confirm is None:
                    raise DuplicateQuestionId(record["id"])
                if not confirm(bucket[index]):
                    logger.info("Kept existing question %s", record["id"])
                    return UpsertResult.NOT_APPLIED
            bucket[index] = record
            result = UpsertResult.REPLACED

        logger.info("Question %s %s", record["id"], result.value)
        self.save()
        return result

    def merge(self, partial: BankData) -> int:
        """
        Append every bucket of ``partial`` to the matching bucket here.

        Ids are not deduplicated. Returns the number of questions appended.
        """
        merged = copy.deepcopy(self.data)
        for level, years in partial.items():
            level_data = merged.setdefault(level, {})
            for year, categories in years.items():
                year_data = level_data.setdefault(year, {})
                for category, questions in categories.items():
                    year_data.setdefault(category, []).extend(copy.deepcopy(questions))

        self.data = merged
        added = count_questions(partial)
        self.save()
        return added

    def clear(self) -> None:
        self.data = empty_bank()
        logger.info("Question bank cleared")
        self.save()

    # Reporting

    def statistics(self) -> dict[str, dict[str, int]]:
        """Year count and question count for each level."""
        return {
            level: {
                "years": len(years),
                "questions": count_questions({level: years}),
            }
            for level, years in self.data.items()
        }

    def structure(self) -> dict[str, dict[str, dict[str, int]]]:
        """Question count of every bucket, in bank order."""
        return {
            level: {
                year: {category: len(questions) for category, questions in categories.items()}
                for year, categories in years.items()
            }
            for level, years in self.data.items()
        }

    def categories_for(self, level: str) -> tuple[str, ...]:
        """Categories a mock exam covers at this level."""
        if level == "topik2":
            return CATEGORIES
        return CATEGORIES[:2]
