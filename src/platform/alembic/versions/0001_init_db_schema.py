"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Schema:
- event: Events with inventory counters and optimistic-concurrency version
- booking: Bookings with UUID primary key, unique ticket_id and check-in stamps

The CHECK constraints keep the inventory balanced at the database level:
available + sold = total, and a booking carries check-in stamps iff it is used.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables with final schema."""

    # Event table
    op.create_table(
        'event',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('organiser_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_tickets', sa.Integer(), nullable=False),
        sa.Column('available_tickets', sa.Integer(), nullable=False),
        sa.Column('sold_tickets', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('type', sa.String(length=10), nullable=False, server_default='free'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('total_tickets >= 0', name='ck_event_total_non_negative'),
        sa.CheckConstraint('available_tickets >= 0', name='ck_event_available_non_negative'),
        sa.CheckConstraint('sold_tickets >= 0', name='ck_event_sold_non_negative'),
        sa.CheckConstraint(
            'available_tickets + sold_tickets = total_tickets', name='ck_event_inventory_balance'
        ),
        sa.CheckConstraint('price >= 0', name='ck_event_price_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_event_organiser_id'), 'event', ['organiser_id'], unique=False)

    # Booking table
    op.create_table(
        'booking',
        sa.Column('id', UUID(as_uuid=True), nullable=False),
        sa.Column('event_id', UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('ticket_id', sa.String(length=40), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('registration_type', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='confirmed'),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('checked_in_by', sa.Integer(), nullable=True),
        sa.Column('check_in_method', sa.String(length=20), nullable=True),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.text('now()'),
            nullable=False,
        ),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['event_id'], ['event.id']),
        sa.CheckConstraint('quantity >= 1', name='ck_booking_quantity_positive'),
        sa.CheckConstraint(
            "(status = 'used') = (checked_in_at IS NOT NULL)", name='ck_booking_checked_in_is_used'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_id'),
    )
    op.create_index(op.f('ix_booking_event_id'), 'booking', ['event_id'], unique=False)
    op.create_index(op.f('ix_booking_user_id'), 'booking', ['user_id'], unique=False)
    op.create_index('ix_booking_user_event', 'booking', ['user_id', 'event_id'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index('ix_booking_user_event', table_name='booking')
    op.drop_index(op.f('ix_booking_user_id'), table_name='booking')
    op.drop_index(op.f('ix_booking_event_id'), table_name='booking')
    op.drop_table('booking')
    op.drop_index(op.f('ix_event_organiser_id'), table_name='event')
    op.drop_table('event')
