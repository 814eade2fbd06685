"""booking schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

showtime_status = sa.Enum('SCHEDULED', 'IN_PROGRESS', 'FINISHED', 'CANCELLED', name='showtime_status')
seat_category = sa.Enum('REGULAR', 'PREFERENTIAL', 'VIP', name='seat_category')
ticket_status = sa.Enum('ACTIVE', 'CANCELLED', 'USED', name='ticket_status')
purchase_status = sa.Enum('CONFIRMED', 'CANCELLED', name='purchase_status')
payment_method = sa.Enum('CREDIT_CARD', 'DEBIT_CARD', 'PSE', 'BANK_TRANSFER', 'CASH', name='payment_method')


def timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    # Catalog tables read by the booking core
    op.create_table(
        'showtimes',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('movie_id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('starts_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ends_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('seat_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('status', showtime_status, nullable=False),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_showtimes_movie_id'), 'showtimes', ['movie_id'], unique=False)
    op.create_index(op.f('ix_showtimes_room_id'), 'showtimes', ['room_id'], unique=False)
    op.create_index(op.f('ix_showtimes_starts_at'), 'showtimes', ['starts_at'], unique=False)

    op.create_table(
        'seats',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=False),
        sa.Column('row_label', sa.String(length=5), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('category', seat_category, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('room_id', 'row_label', 'number', name='uq_seat_room_position')
    )
    op.create_index(op.f('ix_seats_room_id'), 'seats', ['room_id'], unique=False)

    op.create_table(
        'combos',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='true'),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Purchases and what they own
    op.create_table(
        'purchases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('purchased_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('total_seats', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_concessions', sa.Numeric(12, 2), nullable=False),
        sa.Column('total_general', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_method', payment_method, nullable=False),
        sa.Column('status', purchase_status, nullable=False),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('receipt_location', sa.String(length=1000), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('total_general = total_seats + total_concessions', name='ck_purchase_total_general'),
        sa.CheckConstraint("(status = 'CANCELLED') = (cancelled_at IS NOT NULL)", name='ck_purchase_cancelled_at')
    )
    op.create_index(op.f('ix_purchases_user_id'), 'purchases', ['user_id'], unique=False)
    op.create_index(op.f('ix_purchases_status'), 'purchases', ['status'], unique=False)

    op.create_table(
        'seat_tickets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('purchase_id', sa.Integer(), nullable=False),
        sa.Column('showtime_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', ticket_status, nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(['purchase_id'], ['purchases.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['showtime_id'], ['showtimes.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['seat_id'], ['seats.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_seat_tickets_purchase_id'), 'seat_tickets', ['purchase_id'], unique=False)
    op.create_index(op.f('ix_seat_tickets_showtime_id'), 'seat_tickets', ['showtime_id'], unique=False)
    # At most one ACTIVE ticket per seat and showtime; cancelled rows stay for history
    op.create_index(
        'uq_seat_tickets_active_seat',
        'seat_tickets',
        ['showtime_id', 'seat_id'],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )

    op.create_table(
        'concession_line_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('purchase_id', sa.Integer(), nullable=False),
        sa.Column('combo_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
        *timestamps(),
        sa.ForeignKeyConstraint(['purchase_id'], ['purchases.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['combo_id'], ['combos.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('quantity > 0', name='ck_line_item_quantity_positive'),
        sa.CheckConstraint('subtotal = quantity * unit_price', name='ck_line_item_subtotal')
    )
    op.create_index(
        op.f('ix_concession_line_items_purchase_id'), 'concession_line_items', ['purchase_id'], unique=False
    )


def downgrade() -> None:
    op.drop_table('concession_line_items')
    op.drop_table('seat_tickets')
    op.drop_table('purchases')
    op.drop_table('combos')
    op.drop_table('seats')
    op.drop_table('showtimes')
    for enum_type in (payment_method, purchase_status, ticket_status, seat_category, showtime_status):
        enum_type.drop(op.get_bind(), checkfirst=True)
