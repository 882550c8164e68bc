from typing import List, Optional

from flask import current_app

from champions import db
from champions.models import LeaderboardScore, GameSession


def record_score(session: GameSession) -> Optional[LeaderboardScore]:
    """Post a completed session to the leaderboard; practice and empty games are skipped. Does not commit."""
    if session.game_mode == 'practice' or session.attempted_words == 0:
        return None
    entry = LeaderboardScore.query.filter_by(session_id=session.id).first()
    if entry:
        return entry
    entry = LeaderboardScore(
        user_id=session.user_id,
        guest_id=session.guest_id,
        session_id=session.id,
        score=session.score,
        accuracy=session.accuracy,
        difficulty=session.difficulty,
        game_mode=session.game_mode,
    )
    db.session.add(entry)
    return entry


def top_scores(difficulty: Optional[str] = None, game_mode: Optional[str] = None, limit: Optional[int] = None) -> List[LeaderboardScore]:
    """Best scores first; equal scores rank the earlier one higher.

    Guest scores are listed without a profile unless LEADERBOARD_INCLUDE_GUESTS is off.
    """
    if limit is None:
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', 10))
    query = LeaderboardScore.query
    if difficulty:
        query = query.filter(LeaderboardScore.difficulty == difficulty)
    if game_mode:
        query = query.filter(LeaderboardScore.game_mode == game_mode)
    if not current_app.config.get('LEADERBOARD_INCLUDE_GUESTS', True):
        query = query.filter(LeaderboardScore.user_id.isnot(None))
    return (
        query.order_by(LeaderboardScore.score.desc(), LeaderboardScore.created_at.asc(), LeaderboardScore.id.asc())
        .limit(limit)
        .all()
    )


def best_scores_for(user_id: int, limit: int = 10) -> List[LeaderboardScore]:
    return (
        LeaderboardScore.query.filter_by(user_id=user_id)
        .order_by(LeaderboardScore.score.desc(), LeaderboardScore.created_at.asc())
        .limit(limit)
        .all()
    )
