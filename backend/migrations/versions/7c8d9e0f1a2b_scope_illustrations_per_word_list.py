"""scope word illustrations to a word list

Revision ID: 7c8d9e0f1a2b
Revises: 1a2b3c4d5e6f
Create Date: 2025-09-16 14:30:00.000000

"""
from datetime import datetime, timezone

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '7c8d9e0f1a2b'
down_revision = '1a2b3c4d5e6f'
branch_labels = None
depends_on = None

SYSTEM_USERNAME = 'system'
LEGACY_LIST_NAME = 'Legacy Illustrations'


def _legacy_list_id(bind):
    """Find or create the hidden list that owns pre-existing illustrations."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    user_id = bind.execute(sa.text('SELECT id FROM "user" WHERE username = :u'), {'u': SYSTEM_USERNAME}).scalar()
    if user_id is None:
        bind.execute(
            sa.text('INSERT INTO "user" (username, password_hash, selected_theme, stars, created_at) '
                    "VALUES (:u, '!', 'default', 0, :now)"),
            {'u': SYSTEM_USERNAME, 'now': now},
        )
        user_id = bind.execute(sa.text('SELECT id FROM "user" WHERE username = :u'), {'u': SYSTEM_USERNAME}).scalar()
    list_id = bind.execute(
        sa.text('SELECT id FROM word_list WHERE user_id = :uid AND name = :n'), {'uid': user_id, 'n': LEGACY_LIST_NAME}
    ).scalar()
    if list_id is None:
        words = [row[0] for row in bind.execute(sa.text('SELECT word FROM word_illustration ORDER BY word'))]
        word_list = sa.table(
            'word_list',
            sa.column('user_id', sa.Integer), sa.column('name', sa.String), sa.column('words', sa.JSON),
            sa.column('visibility', sa.String), sa.column('created_at', sa.DateTime), sa.column('updated_at', sa.DateTime),
        )
        bind.execute(word_list.insert().values(
            user_id=user_id, name=LEGACY_LIST_NAME, words=words, visibility='private', created_at=now, updated_at=now,
        ))
        list_id = bind.execute(
            sa.text('SELECT id FROM word_list WHERE user_id = :uid AND name = :n'), {'uid': user_id, 'n': LEGACY_LIST_NAME}
        ).scalar()
    return list_id


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'word_illustration' not in set(insp.get_table_names()):
        return
    cols = {c['name'] for c in insp.get_columns('word_illustration')}
    if 'word_list_id' not in cols:
        with op.batch_alter_table('word_illustration') as batch_op:
            batch_op.add_column(sa.Column('word_list_id', sa.Integer(), nullable=True))

    has_rows = bind.execute(sa.text('SELECT COUNT(*) FROM word_illustration WHERE word_list_id IS NULL')).scalar()
    if has_rows:
        list_id = _legacy_list_id(bind)
        bind.execute(sa.text('UPDATE word_illustration SET word_list_id = :lid WHERE word_list_id IS NULL'), {'lid': list_id})

    uniques = {u['name'] for u in insp.get_unique_constraints('word_illustration')}
    with op.batch_alter_table('word_illustration') as batch_op:
        if 'uq_word_illustration_word' in uniques:
            batch_op.drop_constraint('uq_word_illustration_word', type_='unique')
        batch_op.alter_column('word_list_id', existing_type=sa.Integer(), nullable=False)
        batch_op.create_foreign_key('fk_word_illustration_word_list', 'word_list', ['word_list_id'], ['id'])
        batch_op.create_unique_constraint('uq_word_illustration_word_list', ['word', 'word_list_id'])
        batch_op.create_index('ix_word_illustration_word_list_id', ['word_list_id'])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    cols = {c['name'] for c in insp.get_columns('word_illustration')}
    if 'word_list_id' not in cols:
        return
    # Keep the earliest illustration per word so the global constraint holds again
    bind.execute(sa.text(
        'DELETE FROM word_illustration WHERE id NOT IN (SELECT MIN(id) FROM word_illustration GROUP BY word)'
    ))
    with op.batch_alter_table('word_illustration') as batch_op:
        batch_op.drop_index('ix_word_illustration_word_list_id')
        batch_op.drop_constraint('uq_word_illustration_word_list', type_='unique')
        batch_op.drop_constraint('fk_word_illustration_word_list', type_='foreignkey')
        batch_op.drop_column('word_list_id')
        batch_op.create_unique_constraint('uq_word_illustration_word', ['word'])
