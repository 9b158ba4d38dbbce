"""Emoji Schemas — Pydantic models for the read API.

Invariants:
    - EmojiResponse.set is null for custom emoji
    - addedBy is serialized in camelCase and keeps the stored id's JSON type
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from emoji_plugin.core.domain_types import ResolvedEmoji


class EmojiResponse(BaseModel):
    """A resolved emoji."""
    model_config = ConfigDict(populate_by_name=True)

    set: str | None
    shortcode: str
    name: str
    added_by: Any = Field(None, alias="addedBy")

    @classmethod
    def from_resolved(cls, emoji: ResolvedEmoji) -> "EmojiResponse":
        # A freshly added emoji carries the acting user; expose only its id
        added_by = getattr(emoji.added_by, "id", emoji.added_by)
        return cls(
            set=emoji.set, shortcode=emoji.shortcode, name=emoji.name,
            added_by=added_by,
        )


class EmojiListResponse(BaseModel):
    """Every known shortcode mapped to its name."""
    emoji: dict[str, str]
