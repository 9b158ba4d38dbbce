"""Custom Emoji Registry — SQLAlchemy implementation of CustomEmojiRegistry.

Invariants:
    - Each call opens and closes its own session via the injected session scope
    - A duplicate shortcode on create raises DuplicateShortcodeError after rollback
    - Records leave this module as CustomEmojiRecord values, never ORM rows

Design Decisions:
    - No existence pre-check before insert: the unique index decides, so concurrent
      adds of one shortcode cannot both succeed
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from emoji_plugin.core.domain_types import CustomEmojiRecord
from emoji_plugin.core.errors import DuplicateShortcodeError
from emoji_plugin.models.custom_emoji import CustomEmoji

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def _to_record(row: CustomEmoji) -> CustomEmojiRecord:
    return CustomEmojiRecord(
        shortcode=row.shortcode, name=row.name, added_by=row.added_by,
    )


class SqlCustomEmojiRegistry:
    """Persists custom emoji rows in the `custom_emoji` table."""

    def __init__(self, session_scope: SessionScope) -> None:
        self._session_scope = session_scope

    async def find_one(self, shortcode: str) -> CustomEmojiRecord | None:
        async with self._session_scope() as db:
            result = await db.execute(
                select(CustomEmoji).where(CustomEmoji.shortcode == shortcode),
            )
            row = result.scalar_one_or_none()
            return _to_record(row) if row else None

    async def list_pairs(self) -> list[tuple[str, str]]:
        """All (shortcode, name) pairs, projected without loading full rows."""
        async with self._session_scope() as db:
            result = await db.execute(
                select(CustomEmoji.shortcode, CustomEmoji.name),
            )
            return [(shortcode, name) for shortcode, name in result.all()]

    async def create(
        self, shortcode: str, name: str, added_by: Any,
    ) -> CustomEmojiRecord:
        async with self._session_scope() as db:
            row = CustomEmoji(shortcode=shortcode, name=name, added_by=added_by)
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                logger.warning(
                    "Duplicate custom emoji shortcode",
                    extra={"shortcode": shortcode},
                )
                raise DuplicateShortcodeError(shortcode) from e
            return _to_record(row)

    async def remove(self, shortcode: str) -> None:
        async with self._session_scope() as db:
            await db.execute(
                delete(CustomEmoji).where(CustomEmoji.shortcode == shortcode),
            )
            await db.commit()
