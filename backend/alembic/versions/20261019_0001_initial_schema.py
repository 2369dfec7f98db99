"""initial reports, matches, and messages schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "reports",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("brand", sa.String(length=50), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=True),
        sa.Column("color", sa.String(length=30), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date_lost_found", sa.DateTime(timezone=True), nullable=False),
        sa.Column("contact_email", sa.String(length=255), nullable=True),
        sa.Column("contact_phone", sa.String(length=32), nullable=True),
        sa.Column("image_url", sa.String(length=1024), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_user_id", "reports", ["user_id"], unique=False)
    op.create_index("ix_reports_type", "reports", ["type"], unique=False)
    op.create_index("ix_reports_brand", "reports", ["brand"], unique=False)
    op.create_index("ix_reports_color", "reports", ["color"], unique=False)
    op.create_index("ix_reports_status", "reports", ["status"], unique=False)
    op.create_index("ix_reports_date_lost_found", "reports", ["date_lost_found"], unique=False)
    op.create_index("ix_reports_expires_at", "reports", ["expires_at"], unique=False)
    op.create_index(
        "ix_reports_type_status_created_at",
        "reports",
        ["type", "status", "created_at"],
        unique=False,
    )
    op.create_index("ix_reports_user_id_created_at", "reports", ["user_id", "created_at"], unique=False)

    op.create_table(
        "matches",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("matched_report_id", sa.Integer(), nullable=False),
        sa.Column("similarity", sa.Float(), nullable=False),
        sa.Column("matched_by", sa.String(length=16), nullable=False, server_default="auto"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("confidence", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("brand_match", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("color_match", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("location_match", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("model_match", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("date_range_match", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["matched_report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("report_id", "matched_report_id", name="uq_matches_report_pair"),
    )
    op.create_index("ix_matches_report_id", "matches", ["report_id"], unique=False)
    op.create_index("ix_matches_matched_report_id", "matches", ["matched_report_id"], unique=False)
    op.create_index("ix_matches_matched_by", "matches", ["matched_by"], unique=False)
    op.create_index("ix_matches_status", "matches", ["status"], unique=False)
    op.create_index("ix_matches_expires_at", "matches", ["expires_at"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("sender_id", sa.String(length=255), nullable=False),
        sa.Column("recipient_id", sa.String(length=255), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("message_type", sa.String(length=32), nullable=False, server_default="inquiry"),
        sa.Column("priority", sa.String(length=16), nullable=False, server_default="normal"),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["report_id"], ["reports.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_sender_id", "messages", ["sender_id"], unique=False)
    op.create_index("ix_messages_recipient_id", "messages", ["recipient_id"], unique=False)
    op.create_index("ix_messages_report_id", "messages", ["report_id"], unique=False)
    op.create_index("ix_messages_read", "messages", ["read"], unique=False)
    op.create_index("ix_messages_deleted", "messages", ["deleted"], unique=False)
    op.create_index("ix_messages_timestamp", "messages", ["timestamp"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_messages_timestamp", table_name="messages")
    op.drop_index("ix_messages_deleted", table_name="messages")
    op.drop_index("ix_messages_read", table_name="messages")
    op.drop_index("ix_messages_report_id", table_name="messages")
    op.drop_index("ix_messages_recipient_id", table_name="messages")
    op.drop_index("ix_messages_sender_id", table_name="messages")
    op.drop_table("messages")

    op.drop_index("ix_matches_expires_at", table_name="matches")
    op.drop_index("ix_matches_status", table_name="matches")
    op.drop_index("ix_matches_matched_by", table_name="matches")
    op.drop_index("ix_matches_matched_report_id", table_name="matches")
    op.drop_index("ix_matches_report_id", table_name="matches")
    op.drop_table("matches")

    op.drop_index("ix_reports_user_id_created_at", table_name="reports")
    op.drop_index("ix_reports_type_status_created_at", table_name="reports")
    op.drop_index("ix_reports_expires_at", table_name="reports")
    op.drop_index("ix_reports_date_lost_found", table_name="reports")
    op.drop_index("ix_reports_status", table_name="reports")
    op.drop_index("ix_reports_color", table_name="reports")
    op.drop_index("ix_reports_brand", table_name="reports")
    op.drop_index("ix_reports_type", table_name="reports")
    op.drop_index("ix_reports_user_id", table_name="reports")
    op.drop_table("reports")
