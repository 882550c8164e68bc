from datetime import datetime, timezone

from champions import db, bcrypt
from flask_login import UserMixin
from champions.services.scoring import accuracy_percent

GAME_MODES = ('standard', 'practice', 'timed', 'quiz', 'scramble', 'mistake', 'crossword', 'head_to_head')
DIFFICULTIES = ('easy', 'medium', 'hard')
CUSTOM_DIFFICULTY = 'custom'
VISIBILITIES = ('private', 'public', 'shared')
MASTERY_ACHIEVEMENT = 'Word List Mastery'


def utcnow():
    # Naive UTC so values compare cleanly after a round trip through SQLite
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    selected_avatar = db.Column(db.String(256), nullable=True)
    selected_theme = db.Column(db.String(64), nullable=False, default='default')
    stars = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'selectedAvatar': self.selected_avatar,
            'selectedTheme': self.selected_theme,
            'stars': self.stars,
            'createdAt': _iso(self.created_at),
        }


class Word(db.Model):
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(100), unique=True, nullable=False, index=True)
    difficulty = db.Column(db.String(16), nullable=False, default=CUSTOM_DIFFICULTY)
    definition = db.Column(db.Text, nullable=True)
    sentence_example = db.Column(db.Text, nullable=True)
    word_origin = db.Column(db.Text, nullable=True)
    part_of_speech = db.Column(db.String(32), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'word': self.word,
            'difficulty': self.difficulty,
            'definition': self.definition,
            'sentenceExample': self.sentence_example,
            'wordOrigin': self.word_origin,
            'partOfSpeech': self.part_of_speech,
        }


class WordList(db.Model):
    __tablename__ = 'word_list'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    words = db.Column(db.JSON, nullable=False, default=list)
    visibility = db.Column(db.String(16), nullable=False, default='private')
    grade_level = db.Column(db.String(32), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    owner = db.relationship('User')
    shares = db.relationship('WordListShare', backref='word_list', lazy='dynamic')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'ownerUsername': self.owner.username if self.owner else None,
            'name': self.name,
            'words': list(self.words or []),
            'wordCount': len(self.words or []),
            'visibility': self.visibility,
            'gradeLevel': self.grade_level,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class WordListShare(db.Model):
    __tablename__ = 'word_list_share'
    __table_args__ = (db.UniqueConstraint('word_list_id', 'user_id', name='uq_word_list_share'),)
    id = db.Column(db.Integer, primary_key=True)
    word_list_id = db.Column(db.Integer, db.ForeignKey('word_list.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    user = db.relationship('User')


class WordIllustration(db.Model):
    __tablename__ = 'word_illustration'
    __table_args__ = (db.UniqueConstraint('word', 'word_list_id', name='uq_word_illustration_word_list'),)
    id = db.Column(db.Integer, primary_key=True)
    word = db.Column(db.String(100), nullable=False)
    word_list_id = db.Column(db.Integer, db.ForeignKey('word_list.id'), nullable=False, index=True)
    image_url = db.Column(db.String(512), nullable=False)
    source = db.Column(db.String(32), nullable=False, default='upload')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'word': self.word,
            'wordListId': self.word_list_id,
            'imageUrl': self.image_url,
            'source': self.source,
        }


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    guest_id = db.Column(db.String(64), nullable=True, index=True)
    word_list_id = db.Column(db.Integer, db.ForeignKey('word_list.id'), nullable=True, index=True)
    difficulty = db.Column(db.String(16), nullable=False, default=CUSTOM_DIFFICULTY)
    game_mode = db.Column(db.String(32), nullable=False, default='standard')
    total_words = db.Column(db.Integer, nullable=False, default=0)
    correct_words = db.Column(db.Integer, nullable=False, default=0)
    incorrect_words = db.Column(db.JSON, nullable=False, default=list)
    score = db.Column(db.Integer, nullable=False, default=0)
    best_streak = db.Column(db.Integer, nullable=False, default=0)
    stars_earned = db.Column(db.Integer, nullable=False, default=0)
    challenge_id = db.Column(db.Integer, db.ForeignKey('challenge.id'), nullable=True)
    time_seconds = db.Column(db.Integer, nullable=True)
    is_complete = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    attempts = db.relationship('WordAttempt', backref='session', lazy='dynamic', order_by='WordAttempt.id')

    @property
    def attempted_words(self):
        return self.correct_words + len(self.incorrect_words or [])

    @property
    def accuracy(self):
        return accuracy_percent(self.correct_words, self.attempted_words)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'wordListId': self.word_list_id,
            'difficulty': self.difficulty,
            'gameMode': self.game_mode,
            'totalWords': self.total_words,
            'correctWords': self.correct_words,
            'incorrectWords': list(self.incorrect_words or []),
            'score': self.score,
            'bestStreak': self.best_streak,
            'accuracy': self.accuracy,
            'starsEarned': self.stars_earned,
            'challengeId': self.challenge_id,
            'timeSeconds': self.time_seconds,
            'isComplete': self.is_complete,
            'completedAt': _iso(self.completed_at),
            'createdAt': _iso(self.created_at),
        }


class WordAttempt(db.Model):
    __tablename__ = 'word_attempt'
    __table_args__ = (db.UniqueConstraint('session_id', 'word_id', name='uq_word_attempt_session_word'),)
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    word_id = db.Column(db.Integer, db.ForeignKey('word.id'), nullable=False)
    user_answer = db.Column(db.String(200), nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    elapsed_ms = db.Column(db.Integer, nullable=True)
    attempted_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    word = db.relationship('Word')

    def to_dict(self):
        return {
            'id': self.id,
            'sessionId': self.session_id,
            'wordId': self.word_id,
            'word': self.word.word if self.word else None,
            'userAnswer': self.user_answer,
            'isCorrect': self.is_correct,
            'elapsedMs': self.elapsed_ms,
            'attemptedAt': _iso(self.attempted_at),
        }


class LeaderboardScore(db.Model):
    __tablename__ = 'leaderboard_score'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)
    guest_id = db.Column(db.String(64), nullable=True)
    session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, unique=True)
    score = db.Column(db.Integer, nullable=False)
    accuracy = db.Column(db.Integer, nullable=False)
    difficulty = db.Column(db.String(16), nullable=False, index=True)
    game_mode = db.Column(db.String(32), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'sessionId': self.session_id,
            'score': self.score,
            'accuracy': self.accuracy,
            'difficulty': self.difficulty,
            'gameMode': self.game_mode,
            'createdAt': _iso(self.created_at),
            'username': self.user.username if self.user else None,
            'selectedAvatar': self.user.selected_avatar if self.user else None,
            'isGuest': self.user_id is None,
        }


class Achievement(db.Model):
    __tablename__ = 'achievement'
    __table_args__ = (db.UniqueConstraint('user_id', 'word_list_id', 'achievement_type', name='uq_achievement_user_list_type'),)
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    word_list_id = db.Column(db.Integer, db.ForeignKey('word_list.id'), nullable=False)
    achievement_type = db.Column(db.String(64), nullable=False, default=MASTERY_ACHIEVEMENT)
    achievement_value = db.Column(db.String(32), nullable=False)
    completed_modes = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'wordListId': self.word_list_id,
            'achievementType': self.achievement_type,
            'achievementValue': self.achievement_value,
            'completedModes': list(self.completed_modes or []),
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }


class UserStreak(db.Model):
    __tablename__ = 'user_streak'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, unique=True)
    current_word_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_word_streak = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'currentWordStreak': self.current_word_streak,
            'longestWordStreak': self.longest_word_streak,
        }


class Challenge(db.Model):
    __tablename__ = 'challenge'
    id = db.Column(db.Integer, primary_key=True)
    initiator_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    opponent_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    word_list_id = db.Column(db.Integer, db.ForeignKey('word_list.id'), nullable=True)
    status = db.Column(db.String(16), nullable=False, default='pending')  # pending, active, completed, declined
    initiator_score = db.Column(db.Integer, nullable=True)
    initiator_time = db.Column(db.Integer, nullable=True)
    initiator_correct = db.Column(db.Integer, nullable=True)
    initiator_incorrect = db.Column(db.Integer, nullable=True)
    initiator_session_id = db.Column(db.Integer, nullable=True)
    initiator_completed_at = db.Column(db.DateTime, nullable=True)
    opponent_score = db.Column(db.Integer, nullable=True)
    opponent_time = db.Column(db.Integer, nullable=True)
    opponent_correct = db.Column(db.Integer, nullable=True)
    opponent_incorrect = db.Column(db.Integer, nullable=True)
    opponent_session_id = db.Column(db.Integer, nullable=True)
    opponent_completed_at = db.Column(db.DateTime, nullable=True)
    winner_user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    star_awarded = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    completed_at = db.Column(db.DateTime, nullable=True)
    initiator = db.relationship('User', foreign_keys=[initiator_id])
    opponent = db.relationship('User', foreign_keys=[opponent_id])
    word_list = db.relationship('WordList')

    def side_of(self, user_id):
        if user_id == self.initiator_id:
            return 'initiator'
        if user_id == self.opponent_id:
            return 'opponent'
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'initiatorId': self.initiator_id,
            'opponentId': self.opponent_id,
            'wordListId': self.word_list_id,
            'status': self.status,
            'initiatorScore': self.initiator_score,
            'initiatorTime': self.initiator_time,
            'initiatorCorrect': self.initiator_correct,
            'initiatorIncorrect': self.initiator_incorrect,
            'initiatorCompletedAt': _iso(self.initiator_completed_at),
            'opponentScore': self.opponent_score,
            'opponentTime': self.opponent_time,
            'opponentCorrect': self.opponent_correct,
            'opponentIncorrect': self.opponent_incorrect,
            'opponentCompletedAt': _iso(self.opponent_completed_at),
            'winnerUserId': self.winner_user_id,
            'starAwarded': self.star_awarded,
            'createdAt': _iso(self.created_at),
            'completedAt': _iso(self.completed_at),
            'initiatorUsername': self.initiator.username if self.initiator else None,
            'opponentUsername': self.opponent.username if self.opponent else None,
            'wordListName': self.word_list.name if self.word_list else None,
        }


class UserItem(db.Model):
    __tablename__ = 'user_item'
    __table_args__ = (db.UniqueConstraint('user_id', 'item_id', name='uq_user_item'),)
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    item_id = db.Column(db.String(64), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'itemId': self.item_id,
            'quantity': self.quantity,
        }


class FlaggedWord(db.Model):
    __tablename__ = 'flagged_word'
    id = db.Column(db.Integer, primary_key=True)
    word_id = db.Column(db.Integer, db.ForeignKey('word.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    guest_id = db.Column(db.String(64), nullable=True)
    game_mode = db.Column(db.String(32), nullable=False)
    flagged_content_types = db.Column(db.JSON, nullable=False, default=list)
    comments = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(16), nullable=False, default='open')
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'wordId': self.word_id,
            'gameMode': self.game_mode,
            'flaggedContentTypes': list(self.flagged_content_types or []),
            'comments': self.comments,
            'status': self.status,
            'createdAt': _iso(self.created_at),
        }
