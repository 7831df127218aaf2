"""work_links_bookings_notifications

Revision ID: 8a4e6d2c1b57
Revises: 3f1c2a9b7d10
Create Date: 2026-10-19 14:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "8a4e6d2c1b57"
down_revision = "3f1c2a9b7d10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "work_links",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("artist_id", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("work_title", sa.String(length=200), nullable=False),
        sa.Column("work_url", sa.String(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_work_links_artist_id", "work_links", ["artist_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("artist_id", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("booker_id", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("project_type", sa.String(), nullable=False),
        sa.Column("event_date", sa.DateTime(), nullable=False),
        sa.Column("location", sa.String(), nullable=False),
        sa.Column("duration", sa.String(), nullable=True),
        sa.Column("budget", sa.Float(), nullable=True),
        sa.Column("requirements", sa.String(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("technical_requirements", sa.String(), nullable=True),
        sa.Column("script_link", sa.String(), nullable=True),
        sa.Column("deliverables", sa.String(), nullable=True),
        sa.Column("deadline", sa.DateTime(), nullable=True),
        sa.Column("num_shows", sa.Integer(), nullable=True),
        sa.Column("rehearsal_required", sa.Boolean(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_bookings_artist_id", "bookings", ["artist_id"])
    op.create_index("ix_bookings_booker_id", "bookings", ["booker_id"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("related_id", sa.String(), nullable=True),
        sa.Column("related_type", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_is_read", "notifications", ["is_read"])

    # Repeated swipes in one direction share a single live row
    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS uq_connections_live_direction "
        "ON connections (user_id, target_user_id) "
        "WHERE status IN ('pending', 'connected')"
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS uq_connections_live_direction")
    op.drop_index("ix_notifications_is_read", table_name="notifications")
    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_booker_id", table_name="bookings")
    op.drop_index("ix_bookings_artist_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_work_links_artist_id", table_name="work_links")
    op.drop_table("work_links")
