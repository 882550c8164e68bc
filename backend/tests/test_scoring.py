from champions.services.scoring import (
    Attempt, accuracy_percent, is_correct_answer, longest_streak, points_for, score_attempts,
)


def _attempts(*flags, elapsed_ms=None):
    return [Attempt(word_id=i, user_answer='x', is_correct=f, elapsed_ms=elapsed_ms) for i, f in enumerate(flags)]


def test_accuracy_rounds_half_up():
    assert accuracy_percent(0, 0) is None
    assert accuracy_percent(1, 8) == 13  # 12.5
    assert accuracy_percent(2, 3) == 67
    assert accuracy_percent(1, 3) == 33
    assert accuracy_percent(5, 5) == 100


def test_answers_compare_case_and_whitespace_insensitive():
    assert is_correct_answer('Necessary', '  necessary ')
    assert not is_correct_answer('necessary', 'neccessary')
    assert not is_correct_answer('a', '')


def test_streak_and_score():
    attempts = _attempts(True, True, False, True, True, True)
    result = score_attempts(attempts)
    assert result.score == 50
    assert result.best_streak == 3
    assert longest_streak(_attempts(False, False)) == 0
    assert result.accuracy == 83


def test_timed_bonus():
    fast = Attempt(word_id=1, user_answer='x', is_correct=True, elapsed_ms=2500)
    slow = Attempt(word_id=2, user_answer='x', is_correct=True, elapsed_ms=30000)
    assert points_for(fast, 'timed') == 18
    assert points_for(slow, 'timed') == 10
    assert points_for(fast, 'standard') == 10


def test_empty_session():
    result = score_attempts([])
    assert result.score == 0
    assert result.accuracy is None
