from typing import Optional

from flask import current_app

from champions import db
from champions.errors import AuthenticationRequired, BusinessRuleViolation, ValidationError
from champions.identity import Identity, owner_columns
from champions.models import GAME_MODES, FlaggedWord, Word
from champions.services.moderation import clean_text

CONTENT_TYPES = ('definition', 'sentence', 'origin')


def flag_word(identity: Optional[Identity], data: dict) -> FlaggedWord:
    if identity is None:
        raise AuthenticationRequired()
    word_id = data.get('wordId')
    if not isinstance(word_id, int) or not db.session.get(Word, word_id):
        raise ValidationError('Word not found', field='wordId')
    game_mode = data.get('gameMode')
    if game_mode not in GAME_MODES:
        raise ValidationError('Unknown game mode', field='gameMode')
    content_types = data.get('flaggedContentTypes')
    if not isinstance(content_types, list) or not content_types or any(t not in CONTENT_TYPES for t in content_types):
        raise ValidationError(
            f"flaggedContentTypes must list one or more of: {', '.join(CONTENT_TYPES)}", field='flaggedContentTypes'
        )
    comments = data.get('comments')
    if comments is not None and not isinstance(comments, str):
        raise ValidationError('Comments must be text', field='comments')

    reporter = owner_columns(identity)
    duplicate = FlaggedWord.query.filter_by(word_id=word_id, status='open', **reporter).first()
    if duplicate:
        raise BusinessRuleViolation('You already reported this word')

    report = FlaggedWord(
        word_id=word_id,
        game_mode=game_mode,
        flagged_content_types=sorted(set(content_types)),
        comments=clean_text(comments.strip())[:1000] if comments and comments.strip() else None,
        **reporter,
    )
    db.session.add(report)
    db.session.commit()
    current_app.logger.info(f"[flag-word] report={report.id} word={word_id} types={report.flagged_content_types}")
    return report
