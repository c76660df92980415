"""init_db_schema

Revision ID: 0001
Revises:
Create Date: 2025-03-01

Schema:
- lab: Labs with their JSON row layout
- seat: Materialized seats per lab (row/col null for the edge seat)
- lab_user: Accounts mirrored from the identity provider, with ban state
- lab_session: Bookable time windows with remaining capacity and reminder markers
- seat_booking: One seat per user per session
- equipment / session_equipment / equipment_booking: Inventory, per-session offers, reservations
- attendance: One mark per (user, session)

Note: row_config uses the layout format:
  {"rows": [{"name": "A", "seats": 6}, {"name": "B", "seats": 6}], "edgeSeat": true}
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        'created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
    )


def upgrade() -> None:
    """Create all tables with final schema."""

    # ========== STEP 1: Labs, seats and accounts ==========

    op.create_table(
        'lab',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('row_config', sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'seat',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lab_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('row', sa.Integer(), nullable=True),
        sa.Column('col', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['lab_id'], ['lab.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('lab_id', 'name', name='uq_seat_lab_name'),
    )
    op.create_index(op.f('ix_seat_lab_id'), 'seat', ['lab_id'])

    op.create_table(
        'lab_user',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_banned', sa.Boolean(), nullable=False),
        sa.Column('banned_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('banned_by', sa.String(length=255), nullable=True),
        sa.Column('ban_reason', sa.Text(), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_lab_user_email'), 'lab_user', ['email'])

    # ========== STEP 2: Sessions and seat bookings ==========

    op.create_table(
        'lab_session',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lab_id', sa.Integer(), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('capacity', sa.Integer(), nullable=False),
        sa.Column('created_by_id', sa.String(length=255), nullable=False),
        sa.Column('student_reminder_sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('teacher_reminder_sent_at', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.CheckConstraint('capacity >= 0', name='ck_lab_session_capacity'),
        sa.ForeignKeyConstraint(['lab_id'], ['lab.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_lab_session_lab_start', 'lab_session', ['lab_id', 'start_at'])
    op.create_index(op.f('ix_lab_session_created_by_id'), 'lab_session', ['created_by_id'])

    op.create_table(
        'seat_booking',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('seat_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['session_id'], ['lab_session.id']),
        sa.ForeignKeyConstraint(['seat_id'], ['seat.id']),
        sa.PrimaryKeyConstraint('id'),
        # The database is the last word on double booking
        sa.UniqueConstraint('session_id', 'seat_id', name='uq_seat_booking_session_seat'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_seat_booking_session_user'),
    )
    op.create_index(op.f('ix_seat_booking_user_id'), 'seat_booking', ['user_id'])

    # ========== STEP 3: Equipment ==========

    op.create_table(
        'equipment',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lab_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('unit_type', sa.String(length=10), nullable=False),
        sa.Column('expiration_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['lab_id'], ['lab.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_lab_id'), 'equipment', ['lab_id'])

    op.create_table(
        'session_equipment',
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column('available', sa.Integer(), nullable=False),
        sa.Column('reserved', sa.Integer(), nullable=False),
        sa.CheckConstraint(
            'reserved >= 0 AND reserved <= available', name='ck_session_equipment_reserved'
        ),
        sa.ForeignKeyConstraint(['session_id'], ['lab_session.id']),
        sa.ForeignKeyConstraint(['equipment_id'], ['equipment.id']),
        sa.PrimaryKeyConstraint('session_id', 'equipment_id'),
    )

    op.create_table(
        'equipment_booking',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('equipment_id', sa.Integer(), nullable=False),
        sa.Column('seat_booking_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('actual_used', sa.Integer(), nullable=True),
        sa.CheckConstraint('amount > 0', name='ck_equipment_booking_amount'),
        sa.ForeignKeyConstraint(['session_id'], ['lab_session.id']),
        sa.ForeignKeyConstraint(['equipment_id'], ['equipment.id']),
        sa.ForeignKeyConstraint(['seat_booking_id'], ['seat_booking.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_equipment_booking_session_id'), 'equipment_booking', ['session_id'])
    op.create_index(
        op.f('ix_equipment_booking_seat_booking_id'), 'equipment_booking', ['seat_booking_id']
    )

    # ========== STEP 4: Attendance ==========

    op.create_table(
        'attendance',
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('marked_by', sa.String(length=255), nullable=False),
        sa.Column('marked_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['lab_session.id']),
        sa.PrimaryKeyConstraint('user_id', 'session_id'),
    )


def downgrade() -> None:
    """Drop all tables in reverse order of creation (indexes dropped automatically)."""
    op.drop_table('attendance')
    op.drop_table('equipment_booking')
    op.drop_table('session_equipment')
    op.drop_table('equipment')
    op.drop_table('seat_booking')
    op.drop_table('lab_session')
    op.drop_table('lab_user')
    op.drop_table('seat')
    op.drop_table('lab')
