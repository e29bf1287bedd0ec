"""Service layer for importing and exporting question banks."""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any

from topik_practice.config import EXPORT_FILENAME_TEMPLATE, LEVELS
from topik_practice.errors import InvalidFormat
from topik_practice.services.question_bank import BankData, QuestionBank
from topik_practice.utils import json_dump, json_load, today_iso

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    added_count: int
    bank: QuestionBank


def validate(raw: str | bytes | dict[str, Any]) -> BankData:
    """
    Check that ``raw`` has the question bank shape and return it decoded.

    Only the level/year/category/list structure is checked; the questions
    themselves are accepted as they are.

    Raises:
        InvalidFormat: unparsable JSON, no ``topik1``/``topik2`` key, or a
            level that is not year -> category -> list.
    """
    if isinstance(raw, (str, bytes)):
        try:
            data = json_load(raw)
        except ValueError as e:
            raise InvalidFormat(f"Import is not valid JSON: {e}") from e
    else:
        data = raw

    if not isinstance(data, dict):
        raise InvalidFormat("Import must be a JSON object")
    if not any(level in data for level in LEVELS):
        raise InvalidFormat("Import must contain topik1 or topik2")

    partial: BankData = {}
    for key, years in data.items():
        if key not in LEVELS:
            logger.warning("Ignoring unknown top-level key %r in import", key)
            continue
        if not isinstance(years, dict):
            raise InvalidFormat(f"{key} must map years to categories")
        for year, categories in years.items():
            if not isinstance(categories, dict):
                raise InvalidFormat(f"{key}/{year} must map categories to questions")
            for category, questions in categories.items():
                if not isinstance(questions, list):
                    raise InvalidFormat(f"{key}/{year}/{category} must be a list")
        partial[key] = years
    return partial


def import_bank(raw: str | bytes | dict[str, Any], bank: QuestionBank) -> ImportResult:
    """Validate ``raw`` and merge it into ``bank``; the bank is untouched on error."""
    partial = validate(raw)
    added = bank.merge(partial)
    logger.info(f"Imported {added} questions")
    return ImportResult(added_count=added, bank=bank)


def export_bank(bank: QuestionBank) -> str:
    """Serialize the full bank as pretty JSON."""
    return json_dump(bank.data)


def export_filename(today: date | None = None) -> str:
    return EXPORT_FILENAME_TEMPLATE.format(date=today_iso(today))
