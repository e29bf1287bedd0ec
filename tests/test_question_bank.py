import json
from pathlib import Path

import pytest

from topik_practice.config import QUESTION_BANK_KEY
from topik_practice.errors import DuplicateQuestionId
from topik_practice.models import parse_question
from topik_practice.services.question_bank import (
    QuestionBank,
    UpsertResult,
    count_questions,
    empty_bank,
    suggest_question_id,
)
from topik_practice.services.storage import MemoryStore

from conftest import make_question, sample_bank_data


def test_upsert_creates_missing_levels(store: MemoryStore) -> None:
    bank = QuestionBank(empty_bank(), store)
    question = parse_question(make_question("2024-r2-1", "reading", level="topik2", year="2024"))

    assert bank.upsert(question) == UpsertResult.ADDED
    assert [q["id"] for q in bank.bucket("topik2", "2024", "reading")] == ["2024-r2-1"]
    saved = json.loads(store.load(QUESTION_BANK_KEY))
    assert saved["topik2"]["2024"]["reading"][0]["id"] == "2024-r2-1"


def test_upsert_duplicate_requires_decision(bank: QuestionBank) -> None:
    question = parse_question(make_question("2023-l1-1", answer=3))
    with pytest.raises(DuplicateQuestionId) as exc_info:
        bank.upsert(question)
    assert exc_info.value.question_id == "2023-l1-1"
    assert bank.bucket("topik1", "2023", "listening")[0]["answer"] == 1


def test_upsert_declined_is_noop(bank: QuestionBank, store: MemoryStore) -> None:
    question = parse_question(make_question("2023-l1-1", answer=3))
    seen = []

    result = bank.upsert(question, confirm=lambda existing: seen.append(existing["id"]) or False)

    assert result == UpsertResult.NOT_APPLIED
    assert seen == ["2023-l1-1"]
    assert bank.bucket("topik1", "2023", "listening")[0]["answer"] == 1
    assert store.load(QUESTION_BANK_KEY) is None


def test_upsert_replaces_in_place(bank: QuestionBank) -> None:
    question = parse_question(make_question("2023-l1-1", answer=3))

    assert bank.upsert(question, confirm=lambda existing: True) == UpsertResult.REPLACED
    bucket = bank.bucket("topik1", "2023", "listening")
    assert [q["id"] for q in bucket] == ["2023-l1-1", "2023-l1-2"]
    assert bucket[0]["answer"] == 3

    again = parse_question(make_question("2023-l1-1", answer=0))
    assert bank.upsert(again, overwrite=True) == UpsertResult.REPLACED
    assert bank.bucket("topik1", "2023", "listening")[0]["answer"] == 0


def test_merge_appends_without_dedup(bank: QuestionBank) -> None:
    partial = {
        "topik1": {
            "2023": {"listening": [make_question("2023-l1-1"), make_question("2023-l1-9")]},
            "2020": {"reading": [make_question("2020-r1-1", "reading", year="2020")]},
        }
    }

    added = bank.merge(partial)

    assert added == 3
    ids = [q["id"] for q in bank.bucket("topik1", "2023", "listening")]
    assert ids == ["2023-l1-1", "2023-l1-2", "2023-l1-1", "2023-l1-9"]
    assert bank.years("topik1") == ["2023", "2020"]


def test_merge_copies_incoming_questions(bank: QuestionBank) -> None:
    incoming = make_question("2023-l1-7")
    bank.merge({"topik1": {"2023": {"listening": [incoming]}}})
    incoming["answer"] = 0
    assert bank.find("2023-l1-7")["answer"] == 1


def test_clear_leaves_level_shell(bank: QuestionBank, store: MemoryStore) -> None:
    bank.clear()
    assert bank.data == {"topik1": {}, "topik2": {}}
    assert json.loads(store.load(QUESTION_BANK_KEY)) == {"topik1": {}, "topik2": {}}


def test_statistics_and_structure(bank: QuestionBank) -> None:
    assert bank.statistics() == {
        "topik1": {"years": 1, "questions": 4},
        "topik2": {"years": 1, "questions": 3},
    }
    assert bank.structure()["topik2"]["2023"] == {"listening": 1, "reading": 1, "writing": 1}
    assert bank.total_questions() == count_questions(sample_bank_data()) == 7


def test_load_prefers_saved_bank(tmp_path: Path) -> None:
    default_path = tmp_path / "default.json"
    default_path.write_text(json.dumps(sample_bank_data()), encoding="utf-8")

    assert QuestionBank.load(MemoryStore(), default_path).total_questions() == 7

    saved = {"topik1": {"2019": {"reading": [make_question("2019-r1-1", "reading", year="2019")]}}}
    store = MemoryStore({QUESTION_BANK_KEY: json.dumps(saved).encode("utf-8")})
    assert QuestionBank.load(store, default_path).data == saved


def test_load_ignores_corrupt_saved_bank(tmp_path: Path) -> None:
    default_path = tmp_path / "default.json"
    default_path.write_text(json.dumps(sample_bank_data()), encoding="utf-8")
    store = MemoryStore({QUESTION_BANK_KEY: b"{not json"})

    assert QuestionBank.load(store, default_path).total_questions() == 7


def test_bundled_default_bank_loads() -> None:
    bank = QuestionBank.load(MemoryStore())
    assert bank.find("2023-l1-1")["answer"] == 1
    assert bank.statistics()["topik1"]["questions"] > 0
    assert "writing" in bank.year_buckets("topik2", "2023")


def test_suggest_question_id() -> None:
    suggestion = suggest_question_id("2024", "listening", "topik1")
    prefix, number = suggestion.rsplit("-", 1)
    assert prefix == "2024-l1"
    assert len(number) == 2 and number.isdigit()
