"""Create points economy tables"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("plan", sa.String(length=20), server_default=sa.text("'free'"), nullable=False),
        sa.Column("has_profile_picture", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("prefers_dark_mode", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("lms_sync_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "courses",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("grade", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
    )
    op.create_index("ix_courses_user_id", "courses", ["user_id"], unique=False)

    op.create_table(
        "graded_items",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("courses.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("item_type", sa.String(length=50), server_default=sa.text("'assignment'"), nullable=False),
        sa.Column("status", sa.String(length=20), server_default=sa.text("'upcoming'"), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("grade", sa.Float(), nullable=True),
        sa.Column("points_possible", sa.Integer(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
    )
    op.create_index("ix_graded_items_user_id", "graded_items", ["user_id"], unique=False)
    op.create_index("ix_graded_items_course_id", "graded_items", ["course_id"], unique=False)

    op.create_table(
        "achievements",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(length=50), nullable=True),
        sa.Column("difficulty", sa.String(length=20), server_default=sa.text("'easy'"), nullable=False),
        sa.Column("points", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("requirement", sa.JSON(), nullable=False),
        sa.Column("progress", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("unlocked", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.CheckConstraint("progress >= 0 AND progress <= 100", name="ck_achievements_progress_range"),
    )
    op.create_index("ix_achievements_user_id", "achievements", ["user_id"], unique=False)
    op.create_unique_constraint("uq_achievements_user_id_title", "achievements", ["user_id", "title"])

    op.create_table(
        "wagers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("item_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("graded_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("course_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("courses.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("multiplier", sa.Float(), server_default=sa.text("1.0"), nullable=False),
        sa.Column("base_score", sa.Integer(), nullable=False),
        sa.Column("required_score", sa.Integer(), nullable=False),
        sa.Column("resolved", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("won", sa.Boolean(), nullable=True),
        sa.Column("points_awarded", sa.Float(), nullable=True),
        sa.Column("actual_score", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("timezone('utc', now())"), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_wagers_amount_positive"),
        sa.CheckConstraint("multiplier >= 1.0", name="ck_wagers_multiplier_min"),
    )
    op.create_index("ix_wagers_user_id", "wagers", ["user_id"], unique=False)
    op.create_index("ix_wagers_item_id", "wagers", ["item_id"], unique=False)
    op.create_index("ix_wagers_resolved", "wagers", ["resolved"], unique=False)
    # pending-stake lookups per user
    op.create_index(
        "ix_wagers_user_id_unresolved",
        "wagers",
        ["user_id"],
        unique=False,
        postgresql_where=sa.text("resolved = false"),
    )


def downgrade() -> None:
    op.drop_index("ix_wagers_user_id_unresolved", table_name="wagers")
    op.drop_index("ix_wagers_resolved", table_name="wagers")
    op.drop_index("ix_wagers_item_id", table_name="wagers")
    op.drop_index("ix_wagers_user_id", table_name="wagers")
    op.drop_table("wagers")

    op.drop_constraint("uq_achievements_user_id_title", "achievements", type_="unique")
    op.drop_index("ix_achievements_user_id", table_name="achievements")
    op.drop_table("achievements")

    op.drop_index("ix_graded_items_course_id", table_name="graded_items")
    op.drop_index("ix_graded_items_user_id", table_name="graded_items")
    op.drop_table("graded_items")

    op.drop_index("ix_courses_user_id", table_name="courses")
    op.drop_table("courses")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
