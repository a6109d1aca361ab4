"""Test mode: answer checking, scoring and result history."""
import time
from dataclasses import dataclass, field
from datetime import datetime

from flashlearn.db import get_connection
from flashlearn.generator import MAX_QUESTIONS
from flashlearn.models import Question


def clamp_question_count(requested: int, card_total: int) -> int:
    return max(1, min(requested, card_total, MAX_QUESTIONS))


def is_answer_correct(question: Question, answer: str | None) -> bool:
    if answer is None:
        return False
    if question.question_type == "fill_blank":
        return answer.lower().strip() == question.correct_answer.lower().strip()
    return answer == question.correct_answer


def score_test(questions: list[Question], answers: list) -> tuple[int, int, int]:
    """Return (correct, total, percentage). Missing answers count as wrong."""
    total = len(questions)
    if total == 0:
        return 0, 0, 0
    correct = sum(
        1 for i, q in enumerate(questions)
        if is_answer_correct(q, answers[i] if i < len(answers) else None)
    )
    return correct, total, int(correct / total * 100 + 0.5)


@dataclass
class QuizRun:
    questions: list[Question]
    time_limit_minutes: int = 0
    started_at: float = field(default_factory=time.time)
    answers: list = field(default_factory=list)

    def time_remaining(self, now: float | None = None) -> float | None:
        """Seconds left, or None when the test is untimed."""
        if self.time_limit_minutes <= 0:
            return None
        now = time.time() if now is None else now
        return max(0.0, self.started_at + self.time_limit_minutes * 60 - now)

    def is_expired(self, now: float | None = None) -> bool:
        remaining = self.time_remaining(now)
        return remaining is not None and remaining <= 0

    @property
    def finished(self) -> bool:
        return len(self.answers) >= len(self.questions)

    def record(self, answer: str) -> None:
        self.answers.append(answer)

    def score(self) -> tuple[int, int, int]:
        return score_test(self.questions, self.answers)


def record_test_result(db_path: str, set_id: str, correct: int, total: int) -> int:
    percentage = int(correct / total * 100 + 0.5) if total else 0
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO test_results (set_id, correct, total, percentage, taken_at) VALUES (?, ?, ?, ?, ?)",
        (set_id, correct, total, percentage, datetime.now().isoformat()),
    )
    conn.commit()
    conn.close()
    return percentage


def get_best_score(db_path: str, set_id: str) -> int | None:
    """Best test percentage for a set, None if never tested."""
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT MAX(percentage) as best FROM test_results WHERE set_id = ?", (set_id,)
    ).fetchone()
    conn.close()
    return row["best"]
