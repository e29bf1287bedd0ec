"""Practice session state machine and scoring."""
import copy
import enum
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from topik_practice.config import MOCK_SECONDS
from topik_practice.errors import SessionStateError
from topik_practice.services.countdown import Countdown
from topik_practice.services.question_bank import QuestionBank
from topik_practice.services.wrong_answers import WrongAnswerSet, is_graded, is_miss
from topik_practice.utils import format_clock

logger = logging.getLogger(__name__)


class SessionMode(str, enum.Enum):
    REGULAR = "regular"
    MOCK = "mock"
    WRONG_REVIEW = "wrong-review"


class SessionState(str, enum.Enum):
    """Lifecycle of a practice session."""

    IDLE = "idle"
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Score:
    correct_count: int
    graded_count: int
    percentage: int


@dataclass
class SessionResults:
    mode: str
    total: int
    correct_count: int
    graded_count: int
    percentage: int
    expired: bool = False
    missed_ids: list[str] = field(default_factory=list)
    new_wrong_ids: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "mode": self.mode,
            "total": self.total,
            "correctCount": self.correct_count,
            "gradedCount": self.graded_count,
            "percentage": self.percentage,
            "expired": self.expired,
            "missedIds": list(self.missed_ids),
            "newWrongIds": list(self.new_wrong_ids),
        }


def percentage(correct: int, graded: int) -> int:
    """Whole percent, rounded half up; 0 when nothing is graded."""
    if graded == 0:
        return 0
    value = Decimal(100 * correct) / Decimal(graded)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def score_session(questions: list[dict[str, Any]], answers: dict[str, int]) -> Score:
    """Score graded questions only; essays never count."""
    graded = [q for q in questions if is_graded(q)]
    correct = sum(1 for q in graded if answers.get(q.get("id")) == q.get("answer"))
    return Score(
        correct_count=correct,
        graded_count=len(graded),
        percentage=percentage(correct, len(graded)),
    )


class SessionController:
    """
    Runs one practice session at a time.

    ``setup`` replaces whatever session came before, including its timer.
    """

    def __init__(
        self,
        bank: QuestionBank,
        wrong_answers: WrongAnswerSet,
        countdown: Countdown | None = None,
    ) -> None:
        self.bank = bank
        self.wrong_answers = wrong_answers
        self.countdown = countdown or Countdown()
        self.state = SessionState.IDLE
        self.mode: SessionMode | None = None
        self.questions: list[dict[str, Any]] = []
        self.answers: dict[str, int] = {}
        self.cursor = 0
        self._results: SessionResults | None = None

    @property
    def completed(self) -> bool:
        return self.state == SessionState.COMPLETED

    def setup(
        self,
        mode: SessionMode | str,
        level: str = "topik1",
        year: str = "",
        category: str | None = None,
    ) -> SessionState:
        """Select the working set for ``mode`` and start the session."""
        mode = SessionMode(mode)
        # An expired mock exam still finishes before it is replaced.
        self.sync()
        self.countdown.cancel()

        if mode == SessionMode.WRONG_REVIEW:
            questions = self.wrong_answers.snapshot()
        elif mode == SessionMode.MOCK:
            year_buckets = self.bank.year_buckets(level, year)
            questions = []
            for name in self.bank.categories_for(level):
                questions.extend(year_buckets.get(name, []))
        else:
            questions = self.bank.bucket(level, year, category or "")

        self.mode = mode
        self.questions = copy.deepcopy(list(questions))
        self.answers = {}
        self.cursor = 0
        self._results = None
        self.state = SessionState.SETUP

        if self.questions:
            self.state = SessionState.IN_PROGRESS
            if mode == SessionMode.MOCK:
                self.countdown.start(MOCK_SECONDS.get(level, MOCK_SECONDS["topik1"]), self._on_expired)

        logger.info(
            "Session setup: mode=%s level=%s year=%s category=%s questions=%d",
            mode.value, level, year, category, len(self.questions),
        )
        return self.state

    def sync(self) -> None:
        """Catch the countdown up with the clock."""
        self.countdown.sync()

    def _require_in_progress(self) -> None:
        if self.state != SessionState.IN_PROGRESS:
            raise SessionStateError(f"Session is {self.state.value}")

    def submit_answer(self, question_id: str, option_index: int) -> None:
        self._require_in_progress()
        self.answers[question_id] = option_index

    def advance(self, step: int = 1) -> SessionState:
        """Move the cursor; stepping past the last question finishes."""
        self._require_in_progress()
        target = self.cursor + step
        if target >= len(self.questions):
            self.finish()
        else:
            self.cursor = max(0, target)
        return self.state

    def finish(self) -> SessionResults:
        if self.state == SessionState.COMPLETED and self._results is not None:
            return self._results
        self._require_in_progress()
        return self._complete(expired=False)

    def _on_expired(self) -> None:
        if self.state == SessionState.IN_PROGRESS:
            logger.info("Time is up, finishing %s session", self.mode.value)
            self._complete(expired=True)

    def _complete(self, expired: bool) -> SessionResults:
        self.countdown.cancel()
        score = score_session(self.questions, self.answers)
        added = self.wrong_answers.record_misses(self.questions, self.answers)
        missed = [q.get("id") for q in self.questions if is_miss(q, self.answers)]
        self._results = SessionResults(
            mode=self.mode.value,
            total=len(self.questions),
            correct_count=score.correct_count,
            graded_count=score.graded_count,
            percentage=score.percentage,
            expired=expired,
            missed_ids=missed,
            new_wrong_ids=[q.get("id") for q in added],
        )
        self.state = SessionState.COMPLETED
        logger.info(
            "Session finished: %d/%d correct (%d%%)",
            score.correct_count, score.graded_count, score.percentage,
        )
        return self._results

    def results(self) -> SessionResults:
        if self.state != SessionState.COMPLETED or self._results is None:
            raise SessionStateError("Session has not finished")
        return self._results

    def current_question(self) -> dict[str, Any] | None:
        if not self.questions:
            return None
        return self.questions[self.cursor]

    def view(self) -> dict[str, Any]:
        """Snapshot of the session for the UI."""
        return {
            "state": self.state.value,
            "mode": self.mode.value if self.mode else None,
            "cursor": self.cursor,
            "total": len(self.questions),
            "answeredCount": len(self.answers),
            "answers": dict(self.answers),
            "question": self.current_question(),
            "timer": {
                "armed": self.countdown.armed,
                "remaining": self.countdown.remaining,
                "display": format_clock(self.countdown.remaining),
            },
        }
