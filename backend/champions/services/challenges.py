"""Head-to-head challenges.

pending -> active (opponent accepts) -> completed (both sides finished)
pending -> declined (opponent declines, terminal)

Side results, settlement and the winner's reward are each written with a
conditional UPDATE whose row count decides who got there first, so two
players finishing at the same moment settle the challenge exactly once.
"""

from typing import List, Optional

from flask import current_app
from sqlalchemy import or_

from champions import db
from champions.errors import AccessDenied, BusinessRuleViolation, NotFound, ValidationError
from champions.identity import Authenticated
from champions.models import Challenge, GameSession, User, utcnow
from champions.services.word_lists import get_readable_word_list

PENDING = 'pending'
ACTIVE = 'active'
COMPLETED = 'completed'
DECLINED = 'declined'


def get_challenge(challenge_id: int, populate_existing: bool = False) -> Challenge:
    challenge = db.session.get(Challenge, challenge_id, populate_existing=populate_existing)
    if not challenge:
        raise NotFound('Challenge not found')
    return challenge


def get_participant_challenge(challenge_id: int, user_id: int) -> Challenge:
    challenge = get_challenge(challenge_id)
    if challenge.side_of(user_id) is None:
        raise AccessDenied('You are not part of this challenge')
    return challenge


def create_challenge(initiator_id: int, opponent_id: Optional[int], opponent_username: Optional[str], word_list_id) -> Challenge:
    if opponent_id is None and opponent_username:
        opponent = User.query.filter_by(username=opponent_username.strip()).first()
    else:
        opponent = db.session.get(User, opponent_id) if opponent_id is not None else None
    if not opponent:
        raise NotFound('Opponent not found')
    if opponent.id == initiator_id:
        raise ValidationError('You cannot challenge yourself', field='opponentId')
    if not isinstance(word_list_id, int):
        raise ValidationError('Word list ID is required', field='wordListId')
    word_list = get_readable_word_list(word_list_id, Authenticated(initiator_id))
    challenge = Challenge(initiator_id=initiator_id, opponent_id=opponent.id, word_list_id=word_list.id, status=PENDING)
    db.session.add(challenge)
    db.session.commit()
    current_app.logger.info(f"[challenge-create] challenge={challenge.id} initiator={initiator_id} opponent={opponent.id}")
    return challenge


def _transition(challenge: Challenge, user_id: int, target: str) -> Challenge:
    if user_id != challenge.opponent_id:
        raise AccessDenied('Only the challenged player can respond')
    updated = Challenge.query.filter(
        Challenge.id == challenge.id, Challenge.status == PENDING
    ).update({Challenge.status: target}, synchronize_session=False)
    if not updated:
        db.session.rollback()
        raise BusinessRuleViolation(f'Challenge is already {get_challenge(challenge.id, populate_existing=True).status}')
    db.session.commit()
    current_app.logger.info(f"[challenge-{target}] challenge={challenge.id} user={user_id}")
    return get_challenge(challenge.id, populate_existing=True)


def accept_challenge(challenge_id: int, user_id: int) -> Challenge:
    return _transition(get_participant_challenge(challenge_id, user_id), user_id, ACTIVE)


def decline_challenge(challenge_id: int, user_id: int) -> Challenge:
    return _transition(get_participant_challenge(challenge_id, user_id), user_id, DECLINED)


def ensure_can_play(challenge: Challenge, user_id: int) -> str:
    side = challenge.side_of(user_id)
    if side is None:
        raise AccessDenied('You are not part of this challenge')
    if challenge.status != ACTIVE:
        raise BusinessRuleViolation('Challenge is not active')
    if getattr(challenge, f'{side}_completed_at') is not None:
        raise BusinessRuleViolation('You already finished this challenge')
    return side


def record_result(challenge_id: int, session: GameSession) -> Challenge:
    """Store one side's finished session and settle the challenge if both are in.

    Does not commit; the caller owns the transaction.
    """
    challenge = get_challenge(challenge_id)
    side = challenge.side_of(session.user_id)
    if side is None:
        raise AccessDenied('You are not part of this challenge')
    if getattr(challenge, f'{side}_session_id') == session.id:
        return challenge
    completed_col = getattr(Challenge, f'{side}_completed_at')
    updated = Challenge.query.filter(
        Challenge.id == challenge.id,
        Challenge.status == ACTIVE,
        completed_col.is_(None),
    ).update({
        getattr(Challenge, f'{side}_score'): session.score,
        getattr(Challenge, f'{side}_time'): session.time_seconds,
        getattr(Challenge, f'{side}_correct'): session.correct_words,
        getattr(Challenge, f'{side}_incorrect'): len(session.incorrect_words or []),
        getattr(Challenge, f'{side}_session_id'): session.id,
        completed_col: utcnow(),
    }, synchronize_session=False)
    if not updated:
        raise BusinessRuleViolation('A result was already submitted for this challenge')
    current_app.logger.info(f"[challenge-result] challenge={challenge.id} side={side} score={session.score}")
    resolve_challenge(challenge.id)
    return get_challenge(challenge.id, populate_existing=True)


def decide_winner(challenge: Challenge) -> Optional[int]:
    if challenge.initiator_score == challenge.opponent_score:
        return None
    if (challenge.initiator_score or 0) > (challenge.opponent_score or 0):
        return challenge.initiator_id
    return challenge.opponent_id


def resolve_challenge(challenge_id: int) -> bool:
    """Settle a challenge once both sides are in; safe to call repeatedly.

    Returns True only for the call that performed the settlement. Does not
    commit.
    """
    challenge = get_challenge(challenge_id, populate_existing=True)
    if challenge.initiator_completed_at is None or challenge.opponent_completed_at is None:
        return False
    winner_id = decide_winner(challenge)
    settled = Challenge.query.filter(
        Challenge.id == challenge.id,
        Challenge.status == ACTIVE,
        Challenge.initiator_completed_at.isnot(None),
        Challenge.opponent_completed_at.isnot(None),
    ).update({
        Challenge.status: COMPLETED,
        Challenge.winner_user_id: winner_id,
        Challenge.completed_at: utcnow(),
    }, synchronize_session=False)
    if not settled:
        return False
    current_app.logger.info(f"[challenge-settled] challenge={challenge.id} winner={winner_id}")
    if winner_id is not None:
        award_winner(challenge.id, winner_id)
    return True


def award_winner(challenge_id: int, winner_id: int) -> bool:
    claimed = Challenge.query.filter(
        Challenge.id == challenge_id,
        Challenge.star_awarded.is_(False),
    ).update({Challenge.star_awarded: True}, synchronize_session=False)
    if not claimed:
        return False
    reward = int(current_app.config.get('CHALLENGE_WIN_REWARD', 1))
    User.query.filter(User.id == winner_id).update({User.stars: User.stars + reward}, synchronize_session=False)
    current_app.logger.info(f"[challenge-award] challenge={challenge_id} winner={winner_id} stars=+{reward}")
    return True


def _involving(user_id: int):
    return Challenge.query.filter(or_(Challenge.initiator_id == user_id, Challenge.opponent_id == user_id))


def pending_for(user_id: int) -> List[Challenge]:
    return _involving(user_id).filter(Challenge.status == PENDING).order_by(Challenge.created_at.desc(), Challenge.id.desc()).all()


def active_for(user_id: int) -> List[Challenge]:
    return _involving(user_id).filter(Challenge.status == ACTIVE).order_by(Challenge.created_at.desc(), Challenge.id.desc()).all()


def completed_for(user_id: int) -> List[Challenge]:
    return _involving(user_id).filter(Challenge.status == COMPLETED).order_by(Challenge.completed_at.desc(), Challenge.id.desc()).all()


def record_for(user_id: int) -> dict:
    wins = losses = ties = stars = 0
    for challenge in completed_for(user_id):
        if challenge.winner_user_id is None:
            ties += 1
        elif challenge.winner_user_id == user_id:
            wins += 1
            if challenge.star_awarded:
                stars += int(current_app.config.get('CHALLENGE_WIN_REWARD', 1))
        else:
            losses += 1
    return {'wins': wins, 'losses': losses, 'ties': ties, 'totalStarsEarned': stars}
