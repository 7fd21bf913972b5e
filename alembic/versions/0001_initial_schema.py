"""Initial schema: users, vacations, vacation_likes

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("role IN ('admin', 'user')", name="users_role_check"),
    )

    op.create_table(
        "vacations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("destination", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("image_public_id", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("end_date >= start_date", name="vacations_dates_check"),
        sa.CheckConstraint("price >= 0 AND price <= 10000", name="vacations_price_check"),
    )
    op.create_index("ix_vacations_start_date", "vacations", ["start_date"])

    op.create_table(
        "vacation_likes",
        sa.Column(
            "vacation_id",
            sa.String(36),
            sa.ForeignKey("vacations.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_vacation_likes_user_id", "vacation_likes", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_vacation_likes_user_id", table_name="vacation_likes")
    op.drop_table("vacation_likes")
    op.drop_index("ix_vacations_start_date", table_name="vacations")
    op.drop_table("vacations")
    op.drop_table("users")
