"""CustomEmoji ORM — persists user-uploaded emoji metadata.

Invariants:
    - shortcode is unique and indexed: the only guard against duplicate-add races
    - name is "<shortcode>.<ext>" and is the blob store key of the image
    - added_by is None for system-originated emoji, otherwise the acting user id
      stored as JSON so ints and strings come back with their own type
    - Rows are created and deleted, never updated in place
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from emoji_plugin.db.base import Base


class CustomEmoji(Base):
    """A shortcode bound to a stored image."""
    __tablename__ = "custom_emoji"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    shortcode: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True,
    )
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    added_by: Mapped[Any] = mapped_column(
        JSON(none_as_null=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
