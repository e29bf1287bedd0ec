import json
from collections import Counter
from datetime import date

import pytest

from topik_practice.errors import InvalidFormat
from topik_practice.services.import_service import (
    export_bank,
    export_filename,
    import_bank,
    validate,
)
from topik_practice.services.question_bank import QuestionBank, empty_bank
from topik_practice.services.storage import MemoryStore

from conftest import make_question, sample_bank_data


def question_multiset(data: dict) -> Counter:
    return Counter(
        (level, year, category, json.dumps(question, sort_keys=True))
        for level, years in data.items()
        for year, categories in years.items()
        for category, questions in categories.items()
        for question in questions
    )


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        b"[1, 2]",
        "[]",
        {"topik3": {}},
        {},
        {"topik1": []},
        {"topik1": {"2023": []}},
        {"topik1": {"2023": {"listening": {}}}},
    ],
)
def test_validate_rejects_bad_shapes(raw: object) -> None:
    with pytest.raises(InvalidFormat):
        validate(raw)


def test_validate_accepts_malformed_questions() -> None:
    raw = {"topik1": {"2023": {"listening": [{"whatever": True}, "not even a dict"]}}}
    assert validate(raw) == raw


def test_validate_accepts_any_category_name() -> None:
    raw = {"topik2": {"2023": {"speaking": [make_question("2023-s2-1", "speaking", level="topik2")]}}}
    assert validate(raw) == raw


def test_validate_drops_unknown_top_level_keys() -> None:
    raw = {"version": 2, "topik2": {}}
    assert validate(raw) == {"topik2": {}}


def test_import_reports_added_count() -> None:
    bank = QuestionBank(empty_bank(), MemoryStore())
    raw = json.dumps(sample_bank_data())

    result = import_bank(raw, bank)

    assert result.added_count == 7
    assert result.bank is bank
    assert bank.find("2023-w2-1")["type"] == "writing"


def test_failed_import_leaves_bank_untouched(bank: QuestionBank, store: MemoryStore) -> None:
    before = json.loads(json.dumps(bank.data))
    with pytest.raises(InvalidFormat):
        import_bank('{"topik1": {"2023": {"listening": "oops"}}}', bank)
    assert bank.data == before
    assert store.values == {}


def test_export_then_import_round_trips(bank: QuestionBank) -> None:
    exported = export_bank(bank)
    fresh = QuestionBank(empty_bank())

    import_bank(exported, fresh)

    assert fresh.data == bank.data
    assert json.loads(exported) == sample_bank_data()


def test_import_into_empty_bank_preserves_questions() -> None:
    raw = {"topik1": {"2022": {"reading": [make_question("2022-r1-1", "reading", year="2022")]}}}
    bank = QuestionBank(empty_bank())

    result = import_bank(raw, bank)

    exported = json.loads(export_bank(result.bank))
    assert question_multiset(exported) == question_multiset(raw)


def test_merge_order_does_not_change_content() -> None:
    first = {"topik1": {"2023": {"listening": [make_question("a"), make_question("b")]}}}
    second = {
        "topik1": {"2023": {"reading": [make_question("c", "reading")]}},
        "topik2": {"2022": {"writing": [make_question("d", "writing", "topik2", "2022", None)]}},
    }

    ab = QuestionBank(empty_bank())
    import_bank(first, ab)
    import_bank(second, ab)
    ba = QuestionBank(empty_bank())
    import_bank(second, ba)
    import_bank(first, ba)

    assert question_multiset(ab.data) == question_multiset(ba.data)


def test_export_is_pretty_and_keeps_unicode(bank: QuestionBank) -> None:
    bank.merge({"topik1": {"2023": {"reading": [make_question("2023-r1-9", "reading") | {"question": "무엇입니까?"}]}}})
    exported = export_bank(bank)
    assert "무엇입니까?" in exported
    assert exported.startswith('{\n  "topik1"')


def test_export_filename() -> None:
    assert export_filename(date(2024, 5, 1)) == "topik-questions-export-2024-05-01.json"
