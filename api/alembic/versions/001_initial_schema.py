"""Initial schema: users, decks, flashcards and the review log

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create user table
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('password', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('full_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('created_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)

    # Create flashcard_deck table
    op.create_table(
        'flashcard_deck',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('color', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('created_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.Column('updated_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_flashcard_deck_user_id'), 'flashcard_deck', ['user_id'], unique=False)

    # Create flashcard table
    op.create_table(
        'flashcard',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('deck_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('note_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('card_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('front_content', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('back_content', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('cloze_content', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('tags', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('ease_factor', sa.Float(), nullable=False),
        sa.Column('interval_days', sa.Integer(), nullable=False),
        sa.Column('repetitions', sa.Integer(), nullable=False),
        sa.Column('last_reviewed', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=True),
        sa.Column('next_review', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.Column('total_reviews', sa.Integer(), nullable=False),
        sa.Column('correct_reviews', sa.Integer(), nullable=False),
        sa.Column('created_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.Column('updated_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(['deck_id'], ['flashcard_deck.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_flashcard_deck_id'), 'flashcard', ['deck_id'], unique=False)
    op.create_index(op.f('ix_flashcard_user_id'), 'flashcard', ['user_id'], unique=False)
    op.create_index(op.f('ix_flashcard_status'), 'flashcard', ['status'], unique=False)
    op.create_index(op.f('ix_flashcard_next_review'), 'flashcard', ['next_review'], unique=False)

    # Create flashcard_review table
    op.create_table(
        'flashcard_review',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('flashcard_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('reviewed_at', sqlmodel.sql.sqltypes.UTCDateTime(), nullable=False),
        sa.Column('quality', sa.Integer(), nullable=False),
        sa.Column('response_time', sa.Float(), nullable=True),
        sa.Column('previous_ease_factor', sa.Float(), nullable=False),
        sa.Column('previous_interval', sa.Integer(), nullable=False),
        sa.Column('previous_repetitions', sa.Integer(), nullable=False),
        sa.Column('new_ease_factor', sa.Float(), nullable=False),
        sa.Column('new_interval', sa.Integer(), nullable=False),
        sa.Column('new_repetitions', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['flashcard_id'], ['flashcard.id'], ),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_flashcard_review_flashcard_id'), 'flashcard_review', ['flashcard_id'], unique=False)
    op.create_index(op.f('ix_flashcard_review_user_id'), 'flashcard_review', ['user_id'], unique=False)
    op.create_index(op.f('ix_flashcard_review_reviewed_at'), 'flashcard_review', ['reviewed_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_flashcard_review_reviewed_at'), table_name='flashcard_review')
    op.drop_index(op.f('ix_flashcard_review_user_id'), table_name='flashcard_review')
    op.drop_index(op.f('ix_flashcard_review_flashcard_id'), table_name='flashcard_review')
    op.drop_table('flashcard_review')
    op.drop_index(op.f('ix_flashcard_next_review'), table_name='flashcard')
    op.drop_index(op.f('ix_flashcard_status'), table_name='flashcard')
    op.drop_index(op.f('ix_flashcard_user_id'), table_name='flashcard')
    op.drop_index(op.f('ix_flashcard_deck_id'), table_name='flashcard')
    op.drop_table('flashcard')
    op.drop_index(op.f('ix_flashcard_deck_user_id'), table_name='flashcard_deck')
    op.drop_table('flashcard_deck')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')
