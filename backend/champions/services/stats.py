from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import func

from champions.errors import ValidationError
from champions.models import GameSession, UserStreak
from champions.services.scoring import accuracy_percent

DATE_FILTERS = {'all': None, 'today': 0, 'week': 6, 'month': 29}
MISSPELLED_LIMIT = 20


def _window_start(date_filter: str, tz_name: Optional[str]) -> Optional[datetime]:
    """Naive UTC start of the window: midnight in the caller's timezone ``days`` days ago."""
    if date_filter not in DATE_FILTERS:
        raise ValidationError(f"dateFilter must be one of: {', '.join(DATE_FILTERS)}", field='dateFilter')
    days = DATE_FILTERS[date_filter]
    if days is None:
        return None
    try:
        tz = ZoneInfo(tz_name) if tz_name else timezone.utc
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError('Unknown timezone', field='timezone')
    local_midnight = datetime.now(tz).replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=days)
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


def user_stats(user_id: int, date_filter: str = 'all', tz_name: Optional[str] = None) -> dict:
    start = _window_start(date_filter, tz_name)
    played_at = func.coalesce(GameSession.completed_at, GameSession.created_at)
    query = GameSession.query.filter(GameSession.user_id == user_id)
    if start is not None:
        query = query.filter(played_at >= start)
    # Abandoned games still count once a word was attempted
    sessions = [s for s in query.order_by(played_at.desc()).all() if s.is_complete or s.attempted_words > 0]

    attempted = sum(s.attempted_words for s in sessions)
    correct = sum(s.correct_words for s in sessions)
    games = len(sessions)
    modes = Counter(s.game_mode for s in sessions)
    misspelled = Counter(w for s in sessions for w in (s.incorrect_words or []))
    streak = UserStreak.query.filter_by(user_id=user_id).first()

    return {
        'totalWordsAttempted': attempted,
        'accuracy': accuracy_percent(correct, attempted),
        'totalGamesPlayed': games,
        'favoriteGameMode': modes.most_common(1)[0][0] if modes else None,
        'averageScore': round(sum(s.score for s in sessions) / games) if games else 0,
        'starsEarned': sum(s.stars_earned for s in sessions),
        'currentStreak': streak.current_word_streak if streak else 0,
        'longestStreak': streak.longest_word_streak if streak else 0,
        'mostMisspelledWords': [{'word': w, 'mistakes': n} for w, n in misspelled.most_common(MISSPELLED_LIMIT)],
    }


def streak_for(user_id: int) -> dict:
    streak = UserStreak.query.filter_by(user_id=user_id).first()
    if not streak:
        return {'currentWordStreak': 0, 'longestWordStreak': 0}
    return streak.to_dict()
