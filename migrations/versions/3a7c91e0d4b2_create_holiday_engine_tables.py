"""create employees, holidays, time_records tables

Revision ID: 3a7c91e0d4b2
Revises:
Create Date: 2026-10-19 09:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3a7c91e0d4b2"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("work_hub", sa.String(length=100), nullable=True),
        sa.Column("base_salary", sa.Float(), nullable=False),
        sa.Column("danger_pay", sa.Float(), nullable=False),
        sa.Column("unhealthy_pay", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_employees_name", "employees", ["name"], unique=False)

    op.create_table(
        "holidays",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("is_recurring", sa.Boolean(), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("date", "name", name="uq_holiday_date_name"),
    )
    op.create_index("ix_holidays_date", "holidays", ["date"], unique=False)
    op.create_index("ix_holidays_state", "holidays", ["state"], unique=False)
    op.create_index(
        "ix_holiday_recurring_active", "holidays", ["is_recurring", "is_active"], unique=False
    )

    op.create_table(
        "time_records",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("employee_id", sa.Integer(), nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("is_valid", sa.Boolean(), nullable=False),
        sa.Column("reason", sa.String(length=200), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_time_records_employee_id", "time_records", ["employee_id"], unique=False)
    op.create_index(
        "ix_time_record_employee_timestamp", "time_records", ["employee_id", "timestamp"], unique=False
    )


def downgrade():
    op.drop_index("ix_time_record_employee_timestamp", table_name="time_records")
    op.drop_index("ix_time_records_employee_id", table_name="time_records")
    op.drop_table("time_records")
    op.drop_index("ix_holiday_recurring_active", table_name="holidays")
    op.drop_index("ix_holidays_state", table_name="holidays")
    op.drop_index("ix_holidays_date", table_name="holidays")
    op.drop_table("holidays")
    op.drop_index("ix_employees_name", table_name="employees")
    op.drop_table("employees")
