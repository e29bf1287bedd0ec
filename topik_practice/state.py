"""Owned application state shared by the HTTP layer."""
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from topik_practice.config import DATA_DIR, DEFAULT_BANK_PATH, STORAGE_BACKEND
from topik_practice.services.question_bank import QuestionBank
from topik_practice.services.session_service import SessionController
from topik_practice.services.storage import KeyValueStore, create_store
from topik_practice.services.wrong_answers import WrongAnswerSet

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    store: KeyValueStore
    bank: QuestionBank
    wrong_answers: WrongAnswerSet
    session: SessionController
    lock: threading.RLock = field(default_factory=threading.RLock)

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        default_bank_path: Path = DEFAULT_BANK_PATH,
    ) -> "AppState":
        """Restore bank and wrong answers from ``store``."""
        bank = QuestionBank.load(store, default_bank_path)
        wrong_answers = WrongAnswerSet.load(store)
        logger.info("Restored %d wrong answers", len(wrong_answers))
        return cls(
            store=store,
            bank=bank,
            wrong_answers=wrong_answers,
            session=SessionController(bank, wrong_answers),
        )


def create_app_state(
    backend: str = STORAGE_BACKEND,
    data_dir: Path = DATA_DIR,
) -> AppState:
    return AppState.load(create_store(backend, data_dir))
