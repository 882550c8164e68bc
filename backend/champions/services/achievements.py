from typing import List, Optional

from flask import current_app

from champions import db
from champions.models import Achievement, GameSession, WordList, MASTERY_ACHIEVEMENT

MAX_STARS = 3
# Timed games end on the clock, so a perfect run also needs this many words
TIMED_MIN_CORRECT = 10
EXCLUDED_MODES = frozenset({'practice'})


def star_tier(mode_count: int) -> Optional[str]:
    """Map distinct perfect modes to a label: 0 -> None, 1 -> '1 Star', n>=3 -> '3 Stars'."""
    stars = min(max(mode_count, 0), MAX_STARS)
    if stars == 0:
        return None
    return f"{stars} {'Star' if stars == 1 else 'Stars'}"


def session_qualifies(session: GameSession) -> bool:
    """Judged against the word count the session started with, not the list's current size."""
    if not session.is_complete or session.game_mode in EXCLUDED_MODES:
        return False
    if session.incorrect_words:
        return False
    if session.game_mode == 'timed':
        return session.correct_words >= min(TIMED_MIN_CORRECT, session.total_words) and session.correct_words > 0
    return session.total_words > 0 and session.correct_words == session.total_words


def qualifying_modes(user_id: int, word_list: WordList) -> List[str]:
    sessions = GameSession.query.filter_by(user_id=user_id, word_list_id=word_list.id, is_complete=True).all()
    return sorted({s.game_mode for s in sessions if session_qualifies(s)})


def recompute_achievement(user_id: int, word_list: WordList) -> Optional[Achievement]:
    """Rebuild the mastery record for (user, list) from completed session history.

    Does not commit. Running it again over the same history leaves the row
    unchanged.
    """
    modes = qualifying_modes(user_id, word_list)
    existing = Achievement.query.filter_by(
        user_id=user_id, word_list_id=word_list.id, achievement_type=MASTERY_ACHIEVEMENT
    ).first()
    value = star_tier(len(modes))
    if value is None:
        if existing:
            db.session.delete(existing)
        return None
    if existing is None:
        existing = Achievement(user_id=user_id, word_list_id=word_list.id, achievement_type=MASTERY_ACHIEVEMENT)
    if existing.achievement_value != value or list(existing.completed_modes or []) != modes:
        existing.achievement_value = value
        existing.completed_modes = modes
        db.session.add(existing)
    return existing


def on_session_completed(session: GameSession) -> bool:
    """Session-completed handler; returns True when the session's mode is newly mastered."""
    if session.user_id is None or session.word_list_id is None:
        return False
    word_list = db.session.get(WordList, session.word_list_id)
    if not word_list:
        return False
    before = Achievement.query.filter_by(
        user_id=session.user_id, word_list_id=word_list.id, achievement_type=MASTERY_ACHIEVEMENT
    ).first()
    previous_modes = set(before.completed_modes or []) if before else set()
    achievement = recompute_achievement(session.user_id, word_list)
    newly_mastered = achievement is not None and session.game_mode in (set(achievement.completed_modes) - previous_modes)
    if newly_mastered:
        session.stars_earned = 1
        current_app.logger.info(
            f"[achievement] user={session.user_id} list={word_list.id} mode={session.game_mode} value={achievement.achievement_value}"
        )
    return newly_mastered


def achievements_for_user(user_id: int) -> List[Achievement]:
    return Achievement.query.filter_by(user_id=user_id).order_by(Achievement.word_list_id).all()
