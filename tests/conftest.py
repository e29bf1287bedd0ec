from typing import Any

import pytest

from topik_practice.services.countdown import Countdown
from topik_practice.services.question_bank import QuestionBank
from topik_practice.services.session_service import SessionController
from topik_practice.services.storage import MemoryStore
from topik_practice.services.wrong_answers import WrongAnswerSet
from topik_practice.state import AppState


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_question(
    question_id: str,
    category: str = "listening",
    level: str = "topik1",
    year: str = "2023",
    answer: int | None = 1,
) -> dict[str, Any]:
    question: dict[str, Any] = {
        "id": question_id,
        "year": year,
        "type": category,
        "level": level,
        "part": 1,
        "question": f"Question {question_id}",
        "answer": answer,
    }
    if category != "writing":
        question["options"] = ["A", "B", "C", "D"]
    return question


def sample_bank_data() -> dict[str, Any]:
    return {
        "topik1": {
            "2023": {
                "listening": [
                    make_question("2023-l1-1", answer=1),
                    make_question("2023-l1-2", answer=2),
                ],
                "reading": [
                    make_question("2023-r1-1", "reading", answer=0),
                    make_question("2023-r1-2", "reading", answer=3),
                ],
            }
        },
        "topik2": {
            "2023": {
                "listening": [make_question("2023-l2-1", level="topik2", answer=0)],
                "reading": [make_question("2023-r2-1", "reading", level="topik2", answer=1)],
                "writing": [make_question("2023-w2-1", "writing", level="topik2", answer=None)],
            }
        },
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def bank(store: MemoryStore) -> QuestionBank:
    return QuestionBank(sample_bank_data(), store)


@pytest.fixture
def wrong_answers(store: MemoryStore) -> WrongAnswerSet:
    return WrongAnswerSet(store=store)


@pytest.fixture
def session(bank: QuestionBank, wrong_answers: WrongAnswerSet, clock: FakeClock) -> SessionController:
    return SessionController(bank, wrong_answers, Countdown(clock=clock))


@pytest.fixture
def app_state(
    store: MemoryStore,
    bank: QuestionBank,
    wrong_answers: WrongAnswerSet,
    session: SessionController,
) -> AppState:
    return AppState(store=store, bank=bank, wrong_answers=wrong_answers, session=session)
