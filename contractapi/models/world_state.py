"""WorldState ORM - one row per world-state key.

Invariants:
    - key is the primary key; a missing row means the key is absent
    - value may be empty bytes (present but empty), never NULL
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from contractapi.db.base import Base


class WorldState(Base):
    __tablename__ = "world_state"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
