from typing import List, Optional

from flask import current_app

from champions import db
from champions.errors import AccessDenied, AuthenticationRequired, BusinessRuleViolation, NotFound, ValidationError
from champions.identity import Authenticated, Identity
from champions.models import (
    VISIBILITIES, Achievement, Challenge, GameSession, User, Word, WordIllustration, WordList, WordListShare,
    CUSTOM_DIFFICULTY,
)
from champions.services.moderation import contains_inappropriate_content, find_inappropriate_words
from champions.services.scoring import accuracy_percent


def normalize_words(raw) -> List[str]:
    if not isinstance(raw, list) or not all(isinstance(w, str) for w in raw):
        raise ValidationError('Words must be a list of strings', field='words')
    seen = set()
    words = []
    for w in raw:
        cleaned = w.strip().lower()
        if cleaned and cleaned not in seen:
            seen.add(cleaned)
            words.append(cleaned)
    lo = int(current_app.config.get('WORD_LIST_MIN_WORDS', 5))
    hi = int(current_app.config.get('WORD_LIST_MAX_WORDS', 500))
    if len(words) < lo:
        raise ValidationError(f'A word list needs at least {lo} words', field='words')
    if len(words) > hi:
        raise ValidationError(f'A word list can have at most {hi} words', field='words')
    too_long = [w for w in words if len(w) > 100]
    if too_long:
        raise ValidationError('Words must be at most 100 characters', field='words', details=too_long)
    flagged = find_inappropriate_words(words)
    if flagged:
        raise ValidationError(
            'Inappropriate content detected',
            field='words',
            details=f"The following words are not appropriate for children: {', '.join(flagged)}",
        )
    return words


def validate_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('Name is required', field='name')
    name = name.strip()
    if len(name) > 100:
        raise ValidationError('Name must be at most 100 characters', field='name')
    if contains_inappropriate_content(name):
        raise ValidationError(
            'Inappropriate content detected',
            field='name',
            details='The list name contains inappropriate content for children. Please choose a different name.',
        )
    return name


def validate_visibility(visibility) -> str:
    if visibility not in VISIBILITIES:
        raise ValidationError(f"Visibility must be one of: {', '.join(VISIBILITIES)}", field='visibility')
    return visibility


def get_word_list(list_id: int) -> WordList:
    word_list = db.session.get(WordList, list_id)
    if not word_list:
        raise NotFound('Word list not found')
    return word_list


def can_read(word_list: WordList, identity: Optional[Identity]) -> bool:
    if word_list.visibility == 'public':
        return True
    if not isinstance(identity, Authenticated):
        return False
    if word_list.user_id == identity.user_id:
        return True
    if word_list.visibility == 'shared':
        return word_list.shares.filter_by(user_id=identity.user_id).first() is not None
    return False


def get_readable_word_list(list_id: int, identity: Optional[Identity]) -> WordList:
    word_list = get_word_list(list_id)
    if not can_read(word_list, identity):
        if not isinstance(identity, Authenticated):
            raise AuthenticationRequired()
        raise AccessDenied()
    return word_list


def get_owned_word_list(list_id: int, user_id: int) -> WordList:
    word_list = get_word_list(list_id)
    if word_list.user_id != user_id:
        raise AccessDenied()
    return word_list


def create_word_list(user_id: int, data: dict) -> WordList:
    word_list = WordList(
        user_id=user_id,
        name=validate_name(data.get('name')),
        words=normalize_words(data.get('words')),
        visibility=validate_visibility(data.get('visibility') or 'private'),
        grade_level=data.get('gradeLevel'),
    )
    db.session.add(word_list)
    db.session.commit()
    current_app.logger.info(f"[word-list-create] list={word_list.id} user={user_id} words={len(word_list.words)}")
    return word_list


def update_word_list(word_list: WordList, data: dict) -> WordList:
    if 'name' in data:
        word_list.name = validate_name(data.get('name'))
    if 'words' in data:
        word_list.words = normalize_words(data.get('words'))
    if 'visibility' in data:
        word_list.visibility = validate_visibility(data.get('visibility'))
        if word_list.visibility != 'shared':
            WordListShare.query.filter_by(word_list_id=word_list.id).delete(synchronize_session=False)
    if 'gradeLevel' in data:
        word_list.grade_level = data.get('gradeLevel')
    db.session.add(word_list)
    db.session.commit()
    return word_list


def delete_word_list(word_list: WordList) -> None:
    open_challenges = Challenge.query.filter(
        Challenge.word_list_id == word_list.id,
        Challenge.status.in_(['pending', 'active']),
    ).count()
    if open_challenges:
        raise BusinessRuleViolation('This word list is used by an open challenge')
    # Sessions keep their history without the list
    GameSession.query.filter_by(word_list_id=word_list.id).update({GameSession.word_list_id: None}, synchronize_session=False)
    Challenge.query.filter_by(word_list_id=word_list.id).update({Challenge.word_list_id: None}, synchronize_session=False)
    Achievement.query.filter_by(word_list_id=word_list.id).delete(synchronize_session=False)
    WordIllustration.query.filter_by(word_list_id=word_list.id).delete(synchronize_session=False)
    WordListShare.query.filter_by(word_list_id=word_list.id).delete(synchronize_session=False)
    db.session.delete(word_list)
    db.session.commit()
    current_app.logger.info(f"[word-list-delete] list={word_list.id}")


def share_word_list(word_list: WordList, username: str) -> WordListShare:
    if word_list.visibility != 'shared':
        raise BusinessRuleViolation("Only lists with 'shared' visibility can be shared")
    target = User.query.filter_by(username=(username or '').strip()).first()
    if not target:
        raise NotFound('User not found')
    if target.id == word_list.user_id:
        raise ValidationError('You already own this list', field='username')
    share = word_list.shares.filter_by(user_id=target.id).first()
    if share:
        return share
    share = WordListShare(word_list_id=word_list.id, user_id=target.id)
    db.session.add(share)
    db.session.commit()
    return share


def unshare_word_list(word_list: WordList, username: str) -> None:
    target = User.query.filter_by(username=(username or '').strip()).first()
    if not target:
        raise NotFound('User not found')
    word_list.shares.filter_by(user_id=target.id).delete(synchronize_session=False)
    db.session.commit()


def lists_owned_by(user_id: int) -> List[WordList]:
    return WordList.query.filter_by(user_id=user_id).order_by(WordList.created_at.desc(), WordList.id.desc()).all()


def public_lists() -> List[WordList]:
    return WordList.query.filter_by(visibility='public').order_by(WordList.created_at.desc(), WordList.id.desc()).all()


def lists_shared_with(user_id: int) -> List[WordList]:
    return (
        WordList.query.join(WordListShare, WordListShare.word_list_id == WordList.id)
        .filter(WordListShare.user_id == user_id, WordList.visibility == 'shared')
        .order_by(WordList.created_at.desc(), WordList.id.desc())
        .all()
    )


def word_list_stats(word_list_id: int, user_id: int) -> dict:
    """Word-weighted accuracy across the caller's sessions plus the latest game's accuracy."""
    sessions = (
        GameSession.query.filter_by(word_list_id=word_list_id, user_id=user_id, is_complete=True)
        .order_by(GameSession.completed_at.desc(), GameSession.id.desc())
        .all()
    )
    if not sessions:
        return {'totalAccuracy': None, 'lastGameAccuracy': None}
    correct = sum(s.correct_words for s in sessions)
    attempted = sum(s.attempted_words for s in sessions)
    return {
        'totalAccuracy': accuracy_percent(correct, attempted),
        'lastGameAccuracy': sessions[0].accuracy,
    }


def upsert_word(text: str) -> Word:
    text = text.strip().lower()
    word = Word.query.filter_by(word=text).first()
    if not word:
        word = Word(word=text, difficulty=CUSTOM_DIFFICULTY)
        db.session.add(word)
        db.session.flush()
    return word


def list_illustrations(word_list: WordList) -> List[WordIllustration]:
    return WordIllustration.query.filter_by(word_list_id=word_list.id).order_by(WordIllustration.word).all()


def set_illustration(word_list: WordList, word: str, image_url: str, source: str = 'upload') -> WordIllustration:
    word = (word or '').strip().lower()
    if word not in (word_list.words or []):
        raise ValidationError('Word is not in this list', field='word')
    if not isinstance(image_url, str) or not image_url.strip():
        raise ValidationError('Image URL is required', field='imageUrl')
    illustration = WordIllustration.query.filter_by(word=word, word_list_id=word_list.id).first()
    if illustration:
        illustration.image_url = image_url.strip()
        illustration.source = source
    else:
        illustration = WordIllustration(word=word, word_list_id=word_list.id, image_url=image_url.strip(), source=source)
    db.session.add(illustration)
    db.session.commit()
    return illustration
