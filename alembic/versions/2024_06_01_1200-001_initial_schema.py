"""initial schema

Revision ID: 001
Revises:
Create Date: 2024-06-01 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create venues table
    op.create_table(
        'venues',
        sa.Column('id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=100), nullable=True),
        sa.Column('website', sa.String(length=500), nullable=True),
        sa.Column('source', sa.String(length=500), nullable=False),
        sa.Column('family', sa.String(length=50), nullable=False),
        sa.Column('last_updated', sa.String(length=40), nullable=True),
        sa.Column('show_ids', ARRAY(sa.String()), server_default=sa.text("'{}'"), nullable=False),
        sa.Column('sessions', JSONB(), server_default=sa.text("'{}'"), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_venues_location'), 'venues', ['location'], unique=False)

    # Create shows table
    op.create_table(
        'shows',
        sa.Column('id', sa.String(length=200), nullable=False),
        sa.Column('name', sa.String(length=500), nullable=False),
        sa.Column('special_edition', sa.String(length=200), nullable=True),
        sa.Column('synopsis', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('duration_readable', sa.String(length=20), nullable=True),
        sa.Column('director', JSONB(), nullable=True),
        sa.Column('writers', JSONB(), nullable=True),
        sa.Column('actors', JSONB(), nullable=True),
        sa.Column('genres', ARRAY(sa.String()), nullable=True),
        sa.Column('poster', sa.String(length=1000), nullable=True),
        sa.Column('trailer', sa.String(length=1000), nullable=True),
        sa.Column('source', sa.String(length=1000), nullable=True),
        sa.Column('original_name', sa.String(length=500), nullable=True),
        sa.Column('tmdb_id', sa.Integer(), nullable=True),
        sa.Column('imdb_id', sa.String(length=20), nullable=True),
        sa.Column('tagline', sa.Text(), nullable=True),
        sa.Column('budget', sa.BigInteger(), nullable=True),
        sa.Column('revenue', sa.BigInteger(), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('release_date', sa.String(length=10), nullable=True),
        sa.Column('original_language', sa.String(length=10), nullable=True),
        sa.Column('popularity', sa.Float(), nullable=True),
        sa.Column('vote_average', sa.Float(), nullable=True),
        sa.Column('vote_count', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_shows_name'), 'shows', ['name'], unique=False)
    op.create_index(op.f('ix_shows_tmdb_id'), 'shows', ['tmdb_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_shows_tmdb_id'), table_name='shows')
    op.drop_index(op.f('ix_shows_name'), table_name='shows')
    op.drop_table('shows')
    op.drop_index(op.f('ix_venues_location'), table_name='venues')
    op.drop_table('venues')
