"""create community reports

Revision ID: 3e1f0a9c2b7d
Revises:
Create Date: 2026-10-16 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import mysql


# revision identifiers, used by Alembic.
revision: str = '3e1f0a9c2b7d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_CATEGORIES = ('Mantenimiento', 'Seguridad', 'Limpieza', 'Áreas Comunes', 'Administración', 'Quejas de Vecinos', 'Otro')
_URGENCIES = ('Bajo', 'Medio', 'Alto')
_STATUSES = ('Pendiente', 'En proceso', 'Resuelto')


def _timestamp() -> sa.types.TypeEngine:
    return sa.DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), 'mysql')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', _timestamp(), nullable=False, index=True),
        sa.Column('updated_at', _timestamp(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'residentials',
        sa.Column('id', sa.String(255), primary_key=True, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'houses',
        sa.Column('id', sa.String(255), primary_key=True, index=True),
        sa.Column('house_number', sa.String(255), nullable=False),
        sa.Column(
            'residential_id',
            sa.String(255),
            sa.ForeignKey('residentials.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )
    op.create_table(
        'residents',
        sa.Column('id', sa.String(255), primary_key=True, index=True),
        sa.Column('first_name', sa.String(255), nullable=False),
        sa.Column('last_name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, unique=True, index=True),
        sa.Column('phone_number', sa.String(255), nullable=True),
        sa.Column('resident_photo_url', sa.Text(), nullable=True),
        sa.Column(
            'house_id',
            sa.String(255),
            sa.ForeignKey('houses.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        *_timestamps(),
    )
    op.create_table(
        'reports',
        sa.Column('id', sa.String(255), primary_key=True, index=True),
        sa.Column(
            'resident_id',
            sa.String(255),
            sa.ForeignKey('residents.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('category', sa.Enum(*_CATEGORIES, name='report_category'), nullable=False),
        sa.Column('urgency', sa.Enum(*_URGENCIES, name='report_urgency'), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('anonymous', sa.Boolean(), nullable=False),
        sa.Column('public', sa.Boolean(), nullable=False, index=True),
        sa.Column('status', sa.Enum(*_STATUSES, name='report_status'), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        'report_images',
        sa.Column('id', sa.String(255), primary_key=True, index=True),
        sa.Column(
            'report_id',
            sa.String(255),
            sa.ForeignKey('reports.id', ondelete='CASCADE'),
            nullable=False,
            index=True,
        ),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('object_name', sa.String(255), nullable=True),
        sa.Column('position', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('report_id', 'position', name='uq_report_images_position'),
    )
    op.create_table(
        'report_votes',
        sa.Column('report_id', sa.String(255), sa.ForeignKey('reports.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('resident_id', sa.String(255), sa.ForeignKey('residents.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('value', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('value IN (-1, 1)', name='ck_report_votes_value'),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('report_votes')
    op.drop_table('report_images')
    op.drop_table('reports')
    op.drop_table('residents')
    op.drop_table('houses')
    op.drop_table('residentials')
