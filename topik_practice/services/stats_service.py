"""Service layer for learning statistics."""
from topik_practice.config import CATEGORIES
from topik_practice.services.question_bank import QuestionBank
from topik_practice.services.session_service import percentage
from topik_practice.services.wrong_answers import WrongAnswerSet


def overall_accuracy(total_questions: int, wrong_count: int) -> int:
    """Share of the bank not in the wrong-answer set, as a whole percent."""
    if wrong_count == 0:
        return 100
    return max(0, percentage(total_questions - wrong_count, total_questions))


def wrong_answer_breakdown(wrong_answers: WrongAnswerSet) -> dict[str, int]:
    """Count wrong answers per category."""
    counts = {category: 0 for category in CATEGORIES}
    for question in wrong_answers.questions:
        category = question.get("type")
        if category in counts:
            counts[category] += 1
    return counts


def build_learning_summary(
    bank: QuestionBank,
    wrong_answers: WrongAnswerSet,
) -> dict[str, object]:
    total = bank.total_questions()
    return {
        "totalQuestions": total,
        "wrongCount": len(wrong_answers),
        "accuracy": overall_accuracy(total, len(wrong_answers)),
        "wrongByCategory": wrong_answer_breakdown(wrong_answers),
    }
