"""Domain Types — value objects and enums shared across the emoji core.

Invariants:
    - ResolvedEmoji.set is None for custom emoji, a set name otherwise
    - CustomEmojiRecord.name is always "<shortcode>.<sniffed extension>"
    - Permissions and event topics are Enums, never raw strings in domain logic

Design Decisions:
    - Frozen dataclasses: resolved values are computed per query and never mutated
    - str Enums: serialize to JSON and compare equal to their wire strings
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Permission(str, Enum):
    """Capabilities checked against the acting user."""
    EMOJI_ADD = "emoji.add"
    EMOJI_REMOVE = "emoji.remove"


class EventTopic(str, Enum):
    """Topics published on the host event bus."""
    EMOJI_ADD = "emoji:add"
    EMOJI_REMOVE = "emoji:remove"


@dataclass(frozen=True)
class CustomEmojiRecord:
    """Persisted custom emoji, as returned by the registry."""
    shortcode: str
    name: str
    added_by: Any = None


@dataclass(frozen=True)
class ResolvedEmoji:
    """An emoji resolved from a registered set or the custom registry."""
    set: str | None
    shortcode: str
    name: str
    added_by: Any = None

    @property
    def is_custom(self) -> bool:
        return self.set is None
