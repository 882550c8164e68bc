from dataclasses import dataclass
from typing import Iterable, Optional

POINTS_PER_CORRECT = 10
# Seconds within which a timed-mode answer still earns a speed bonus
TIMED_BONUS_WINDOW_SEC = 10


@dataclass(frozen=True)
class Attempt:
    word_id: int
    user_answer: str
    is_correct: bool
    elapsed_ms: Optional[int] = None


@dataclass(frozen=True)
class SessionScore:
    score: int
    correct: int
    incorrect: int
    best_streak: int
    accuracy: Optional[int]


def normalize_answer(text) -> str:
    return (text or '').strip().lower()


def is_correct_answer(target: str, answer: str) -> bool:
    return normalize_answer(answer) != '' and normalize_answer(answer) == normalize_answer(target)


def accuracy_percent(correct: int, total: int) -> Optional[int]:
    """Whole-number percentage rounded half up; ``None`` when nothing was attempted."""
    if total <= 0:
        return None
    return (200 * correct + total) // (2 * total)


def points_for(attempt: Attempt, game_mode: str) -> int:
    if not attempt.is_correct:
        return 0
    points = POINTS_PER_CORRECT
    if game_mode == 'timed' and attempt.elapsed_ms is not None:
        elapsed_sec = max(0, attempt.elapsed_ms) // 1000
        points += max(0, TIMED_BONUS_WINDOW_SEC - elapsed_sec)
    return points


def longest_streak(attempts: Iterable[Attempt]) -> int:
    best = run = 0
    for attempt in attempts:
        run = run + 1 if attempt.is_correct else 0
        best = max(best, run)
    return best


def score_attempts(attempts: Iterable[Attempt], game_mode: str = 'standard') -> SessionScore:
    """Score an ordered sequence of attempts.

    +10 per correct answer; timed mode adds a speed bonus of one point per
    second left in the bonus window when an elapsed time was recorded.
    """
    attempts = list(attempts)
    correct = sum(1 for a in attempts if a.is_correct)
    return SessionScore(
        score=sum(points_for(a, game_mode) for a in attempts),
        correct=correct,
        incorrect=len(attempts) - correct,
        best_streak=longest_streak(attempts),
        accuracy=accuracy_percent(correct, len(attempts)),
    )
