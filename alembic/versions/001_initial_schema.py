"""Initial schema: leave_requests

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "leave_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.String(7), nullable=False),
        sa.Column("employee_name", sa.String(100), nullable=False),
        sa.Column("leave_type", sa.String(50), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("reason", sa.Text, nullable=False),
        sa.Column("certificate_path", sa.String(1000), nullable=True),
        sa.Column("status", sa.String(50), nullable=False, server_default="pending"),
        sa.Column("request_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("request_day", sa.Date, nullable=False),
        sa.UniqueConstraint("employee_id", "request_day", name="uq_leave_requests_employee_day"),
    )
    op.create_index("ix_leave_requests_employee_id", "leave_requests", ["employee_id"])


def downgrade() -> None:
    op.drop_index("ix_leave_requests_employee_id", table_name="leave_requests")
    op.drop_table("leave_requests")
