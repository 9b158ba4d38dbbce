"""Emoji Sets — immutable value objects for externally supplied emoji sets.

Invariants:
    - A registered set always has a callable middleware factory
    - Set mappings are read-only copies taken at registration time
    - Registration order is preserved; registering returns a new tuple
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from emoji_plugin.core.errors import InvalidArgumentError
from emoji_plugin.core.repository_protocols import MiddlewareFactory

UNKNOWN_SET_NAME = "unknown"


@dataclass(frozen=True)
class EmojiSet:
    """A registered emoji set: shortcode → name mapping plus its serving middleware."""
    name: str | None
    emoji: Mapping[str, str]
    middleware: MiddlewareFactory

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_SET_NAME

    @classmethod
    def from_provider(cls, provider: object) -> "EmojiSet":
        """Validate an emoji set provider and snapshot it."""
        middleware = getattr(provider, "middleware", None)
        if not callable(middleware):
            raise InvalidArgumentError(
                "Emoji set did not provide middleware.", "set",
            )
        emoji = getattr(provider, "emoji", None)
        if not isinstance(emoji, Mapping):
            raise InvalidArgumentError(
                "Emoji set did not provide an emoji mapping.", "set",
            )
        return cls(
            name=getattr(provider, "name", None),
            emoji=MappingProxyType(dict(emoji)),
            middleware=middleware,
        )


def register_emoji_set(
    sets: tuple[EmojiSet, ...], emoji_set: EmojiSet,
) -> tuple[EmojiSet, ...]:
    """Return a new registration sequence with `emoji_set` appended."""
    return (*sets, emoji_set)
