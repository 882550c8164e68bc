"""initial schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2025-09-02 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '1a2b3c4d5e6f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('selected_avatar', sa.String(length=256), nullable=True),
        sa.Column('selected_theme', sa.String(length=64), nullable=False, server_default='default'),
        sa.Column('stars', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'word',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('word', sa.String(length=100), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False, server_default='custom'),
        sa.Column('definition', sa.Text(), nullable=True),
        sa.Column('sentence_example', sa.Text(), nullable=True),
        sa.Column('word_origin', sa.Text(), nullable=True),
        sa.Column('part_of_speech', sa.String(length=32), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_word_word', 'word', ['word'], unique=True)

    op.create_table(
        'word_list',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('words', sa.JSON(), nullable=False),
        sa.Column('visibility', sa.String(length=16), nullable=False, server_default='private'),
        sa.Column('grade_level', sa.String(length=32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_word_list_user_id', 'word_list', ['user_id'])

    op.create_table(
        'word_list_share',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('word_list_id', sa.Integer(), sa.ForeignKey('word_list.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('word_list_id', 'user_id', name='uq_word_list_share'),
    )
    op.create_index('ix_word_list_share_word_list_id', 'word_list_share', ['word_list_id'])
    op.create_index('ix_word_list_share_user_id', 'word_list_share', ['user_id'])

    # Illustrations started out global, one per word
    op.create_table(
        'word_illustration',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('word', sa.String(length=100), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('source', sa.String(length=32), nullable=False, server_default='upload'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('word', name='uq_word_illustration_word'),
    )

    op.create_table(
        'challenge',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('initiator_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('opponent_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('word_list_id', sa.Integer(), sa.ForeignKey('word_list.id'), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('initiator_score', sa.Integer(), nullable=True),
        sa.Column('initiator_time', sa.Integer(), nullable=True),
        sa.Column('initiator_correct', sa.Integer(), nullable=True),
        sa.Column('initiator_incorrect', sa.Integer(), nullable=True),
        sa.Column('initiator_session_id', sa.Integer(), nullable=True),
        sa.Column('initiator_completed_at', sa.DateTime(), nullable=True),
        sa.Column('opponent_score', sa.Integer(), nullable=True),
        sa.Column('opponent_time', sa.Integer(), nullable=True),
        sa.Column('opponent_correct', sa.Integer(), nullable=True),
        sa.Column('opponent_incorrect', sa.Integer(), nullable=True),
        sa.Column('opponent_session_id', sa.Integer(), nullable=True),
        sa.Column('opponent_completed_at', sa.DateTime(), nullable=True),
        sa.Column('winner_user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('star_awarded', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_challenge_initiator_id', 'challenge', ['initiator_id'])
    op.create_index('ix_challenge_opponent_id', 'challenge', ['opponent_id'])

    op.create_table(
        'game_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('guest_id', sa.String(length=64), nullable=True),
        sa.Column('word_list_id', sa.Integer(), sa.ForeignKey('word_list.id'), nullable=True),
        sa.Column('difficulty', sa.String(length=16), nullable=False, server_default='custom'),
        sa.Column('game_mode', sa.String(length=32), nullable=False, server_default='standard'),
        sa.Column('total_words', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_words', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('incorrect_words', sa.JSON(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('best_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stars_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('challenge_id', sa.Integer(), sa.ForeignKey('challenge.id'), nullable=True),
        sa.Column('time_seconds', sa.Integer(), nullable=True),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_game_session_user_id', 'game_session', ['user_id'])
    op.create_index('ix_game_session_guest_id', 'game_session', ['guest_id'])
    op.create_index('ix_game_session_word_list_id', 'game_session', ['word_list_id'])

    op.create_table(
        'word_attempt',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('game_session.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('word_id', sa.Integer(), sa.ForeignKey('word.id'), nullable=False),
        sa.Column('user_answer', sa.String(length=200), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False),
        sa.Column('elapsed_ms', sa.Integer(), nullable=True),
        sa.Column('attempted_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'word_id', name='uq_word_attempt_session_word'),
    )
    op.create_index('ix_word_attempt_session_id', 'word_attempt', ['session_id'])

    op.create_table(
        'leaderboard_score',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('guest_id', sa.String(length=64), nullable=True),
        sa.Column('session_id', sa.Integer(), sa.ForeignKey('game_session.id'), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('accuracy', sa.Integer(), nullable=False),
        sa.Column('difficulty', sa.String(length=16), nullable=False),
        sa.Column('game_mode', sa.String(length=32), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id'),
    )
    op.create_index('ix_leaderboard_score_user_id', 'leaderboard_score', ['user_id'])
    op.create_index('ix_leaderboard_score_difficulty', 'leaderboard_score', ['difficulty'])

    op.create_table(
        'achievement',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('word_list_id', sa.Integer(), sa.ForeignKey('word_list.id'), nullable=False),
        sa.Column('achievement_type', sa.String(length=64), nullable=False),
        sa.Column('achievement_value', sa.String(length=32), nullable=False),
        sa.Column('completed_modes', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'word_list_id', 'achievement_type', name='uq_achievement_user_list_type'),
    )
    op.create_index('ix_achievement_user_id', 'achievement', ['user_id'])

    op.create_table(
        'user_streak',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('current_word_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_word_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'user_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('item_id', sa.String(length=64), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'item_id', name='uq_user_item'),
    )
    op.create_index('ix_user_item_user_id', 'user_item', ['user_id'])

    op.create_table(
        'flagged_word',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('word_id', sa.Integer(), sa.ForeignKey('word.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
        sa.Column('guest_id', sa.String(length=64), nullable=True),
        sa.Column('game_mode', sa.String(length=32), nullable=False),
        sa.Column('flagged_content_types', sa.JSON(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='open'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_flagged_word_word_id', 'flagged_word', ['word_id'])


def downgrade():
    for table in (
        'flagged_word', 'user_item', 'user_streak', 'achievement', 'leaderboard_score', 'word_attempt',
        'game_session', 'challenge', 'word_illustration', 'word_list_share', 'word_list', 'word', 'user',
    ):
        op.drop_table(table)
