from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, Index, String, text
from maasta.models.profile import generate_uuid
from maasta.schemas.enums import ConnectionStatus


class Connection(SQLModel, table=True):
    """
    One directed interest signal. A mutual connection is two rows, one per
    direction, both `connected`.
    """
    __tablename__ = "connections"
    __table_args__ = (
        Index("ix_connections_pair_status", "user_id", "target_user_id", "status"),
        # At most one live (pending or connected) row per direction
        Index(
            "uq_connections_live_direction",
            "user_id",
            "target_user_id",
            unique=True,
            postgresql_where=text("status IN ('pending', 'connected')"),
            sqlite_where=text("status IN ('pending', 'connected')"),
        ),
    )

    id: str = Field(default_factory=generate_uuid, primary_key=True)
    user_id: str = Field(foreign_key="profiles.id")
    target_user_id: str = Field(foreign_key="profiles.id")

    # Store status as VARCHAR, not Enum
    status: str = Field(
        default=ConnectionStatus.PENDING.value,
        sa_column=Column(String, nullable=False, default=ConnectionStatus.PENDING.value)
    )

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
