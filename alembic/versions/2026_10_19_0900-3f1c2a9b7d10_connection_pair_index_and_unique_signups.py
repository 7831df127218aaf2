"""connection_pair_index_and_unique_signups

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from alembic import op


# revision identifiers, used by Alembic.
revision = "3f1c2a9b7d10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Reciprocal lookups and the pair upgrade filter on (user_id, target_user_id, status)
    op.execute(
        "CREATE INDEX IF NOT EXISTS ix_connections_pair_status "
        "ON connections (user_id, target_user_id, status)"
    )

    # One application per artist per audition, one registration per user per event
    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS uq_audition_application_artist "
        "ON audition_applications (audition_id, artist_id)"
    )
    op.execute(
        "CREATE UNIQUE INDEX IF NOT EXISTS uq_event_registration_user "
        "ON event_registrations (event_id, user_id)"
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS uq_event_registration_user")
    op.execute("DROP INDEX IF EXISTS uq_audition_application_artist")
    op.execute("DROP INDEX IF EXISTS ix_connections_pair_status")
