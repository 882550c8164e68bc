from typing import Optional

from flask import current_app

from champions import db
from champions.errors import AccessDenied, AuthenticationRequired, BusinessRuleViolation, NotFound, ValidationError
from champions.identity import Authenticated, Identity, owner_columns, owns
from champions.models import (
    CUSTOM_DIFFICULTY, DIFFICULTIES, GAME_MODES, GameSession, UserStreak, Word, WordAttempt, WordList, utcnow,
)
from champions.services import achievements as achievement_service
from champions.services import challenges as challenge_service
from champions.services import leaderboard as leaderboard_service
from champions.services.scoring import Attempt, is_correct_answer, score_attempts
from champions.services.word_lists import get_readable_word_list, get_word_list, upsert_word
from champions.socketio_events import notify_challenge, notify_leaderboard


def get_session(session_id: int) -> GameSession:
    session = db.session.get(GameSession, session_id)
    if not session:
        raise NotFound('Session not found')
    return session


def get_owned_session(session_id: int, identity: Optional[Identity]) -> GameSession:
    session = get_session(session_id)
    if not owns(identity, session.user_id, session.guest_id):
        if identity is None:
            raise AuthenticationRequired()
        raise AccessDenied('This session belongs to someone else')
    return session


def create_session(identity: Optional[Identity], data: dict) -> GameSession:
    if identity is None:
        raise AuthenticationRequired('Sign in or start a guest session first')
    game_mode = data.get('gameMode') or 'standard'
    if game_mode not in GAME_MODES:
        raise ValidationError(f"Game mode must be one of: {', '.join(GAME_MODES)}", field='gameMode')
    total_words = data.get('totalWords')
    if total_words is not None and (not isinstance(total_words, int) or isinstance(total_words, bool) or total_words < 1):
        raise ValidationError('totalWords must be a positive integer', field='totalWords')

    challenge_id = data.get('challengeId')
    word_list_id = data.get('wordListId')
    if challenge_id is not None:
        if not isinstance(identity, Authenticated):
            raise AuthenticationRequired()
        challenge = challenge_service.get_challenge(challenge_id)
        challenge_service.ensure_can_play(challenge, identity.user_id)
        if challenge.word_list_id is None:
            raise BusinessRuleViolation('The word list for this challenge no longer exists')
        word_list_id = challenge.word_list_id
        game_mode = 'head_to_head'

    session = GameSession(game_mode=game_mode, challenge_id=challenge_id, **owner_columns(identity))
    if word_list_id is not None:
        if not isinstance(word_list_id, int):
            raise ValidationError('wordListId must be an integer', field='wordListId')
        # The opponent plays the initiator's list even when it is private
        if challenge_id is not None:
            word_list = get_word_list(word_list_id)
        else:
            word_list = get_readable_word_list(word_list_id, identity)
        list_size = len(word_list.words or [])
        if total_words is not None and total_words > list_size:
            raise ValidationError(f'This list only has {list_size} words', field='totalWords')
        session.word_list_id = word_list.id
        session.difficulty = CUSTOM_DIFFICULTY
        session.total_words = total_words or list_size
    else:
        difficulty = data.get('difficulty')
        if difficulty not in DIFFICULTIES:
            raise ValidationError(f"Difficulty must be one of: {', '.join(DIFFICULTIES)}", field='difficulty')
        session.difficulty = difficulty
        session.total_words = total_words or int(current_app.config.get('DEFAULT_SESSION_WORDS', 10))

    db.session.add(session)
    db.session.commit()
    current_app.logger.info(
        f"[session-create] session={session.id} mode={session.game_mode} list={session.word_list_id} difficulty={session.difficulty}"
    )
    return session


def _resolve_word(session: GameSession, data: dict) -> Word:
    # A custom session outlives its list only as history
    if session.word_list_id is None and session.difficulty == CUSTOM_DIFFICULTY:
        raise ValidationError('The word list for this session was deleted', field='wordId')
    word_id = data.get('wordId')
    text = data.get('word')
    word = None
    if word_id is not None:
        if not isinstance(word_id, int):
            raise ValidationError('wordId must be an integer', field='wordId')
        word = db.session.get(Word, word_id)
        if not word:
            raise ValidationError('Word not found', field='wordId')
    elif isinstance(text, str) and text.strip():
        if session.word_list_id is None:
            word = Word.query.filter_by(word=text.strip().lower()).first()
            if not word:
                raise ValidationError('Word not found', field='word')
    else:
        raise ValidationError('wordId or word is required', field='wordId')

    if session.word_list_id is not None:
        word_list = db.session.get(WordList, session.word_list_id)
        allowed = set(word_list.words or []) if word_list else set()
        target = word.word if word else text.strip().lower()
        if target not in allowed:
            raise ValidationError('That word is not part of this session', field='wordId')
        if word is None:
            word = upsert_word(target)
    elif word.difficulty != session.difficulty:
        raise ValidationError('That word is not part of this session', field='wordId')
    return word


def _update_streak(user_id: int, correct: bool) -> None:
    streak = UserStreak.query.filter_by(user_id=user_id).first()
    if not streak:
        streak = UserStreak(user_id=user_id, current_word_streak=0, longest_word_streak=0)
    if correct:
        streak.current_word_streak += 1
        streak.longest_word_streak = max(streak.longest_word_streak, streak.current_word_streak)
    else:
        streak.current_word_streak = 0
    db.session.add(streak)


def record_attempt(session: GameSession, data: dict) -> WordAttempt:
    if session.is_complete:
        raise BusinessRuleViolation('Session is already complete')
    answer = data.get('userAnswer')
    if not isinstance(answer, str):
        raise ValidationError('userAnswer is required', field='userAnswer')
    elapsed_ms = data.get('elapsedMs')
    if elapsed_ms is not None and (not isinstance(elapsed_ms, int) or elapsed_ms < 0):
        raise ValidationError('elapsedMs must be a non-negative integer', field='elapsedMs')
    word = _resolve_word(session, data)
    if session.attempted_words >= session.total_words:
        raise BusinessRuleViolation('Every word in this session has already been attempted')
    if session.attempts.filter_by(word_id=word.id).first():
        raise BusinessRuleViolation('This word was already attempted in this session')

    correct = is_correct_answer(word.word, answer)
    attempt = WordAttempt(
        session_id=session.id,
        user_id=session.user_id,
        word_id=word.id,
        user_answer=answer.strip()[:200],
        is_correct=correct,
        elapsed_ms=elapsed_ms,
    )
    db.session.add(attempt)
    if correct:
        session.correct_words += 1
    else:
        session.incorrect_words = list(session.incorrect_words or []) + [word.word]
    if session.user_id is not None:
        _update_streak(session.user_id, correct)
    db.session.add(session)
    db.session.commit()
    return attempt


def complete_session(session: GameSession, time_seconds=None) -> GameSession:
    """Finish a session and run the session-completed handlers in one transaction."""
    if session.is_complete:
        raise BusinessRuleViolation('Session is already complete')
    if time_seconds is not None and (not isinstance(time_seconds, int) or time_seconds < 0):
        raise ValidationError('timeSeconds must be a non-negative integer', field='timeSeconds')

    attempts = [
        Attempt(word_id=a.word_id, user_answer=a.user_answer, is_correct=a.is_correct, elapsed_ms=a.elapsed_ms)
        for a in session.attempts.all()
    ]
    result = score_attempts(attempts, session.game_mode)
    now = utcnow()
    session.score = result.score
    session.best_streak = result.best_streak
    session.correct_words = result.correct
    session.is_complete = True
    session.completed_at = now
    if time_seconds is None and session.created_at:
        time_seconds = max(0, int((now - session.created_at).total_seconds()))
    session.time_seconds = time_seconds
    db.session.add(session)

    try:
        leaderboard_entry = leaderboard_service.record_score(session)
        achievement_service.on_session_completed(session)
        if session.challenge_id is not None:
            challenge_service.record_result(session.challenge_id, session)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"[session-complete] session={session.id} score={session.score} accuracy={session.accuracy} streak={session.best_streak}"
    )
    if leaderboard_entry is not None:
        notify_leaderboard(leaderboard_entry.difficulty)
    if session.challenge_id is not None:
        notify_challenge(challenge_service.get_challenge(session.challenge_id))
    return session
