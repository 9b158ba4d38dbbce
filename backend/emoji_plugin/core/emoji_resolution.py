"""Emoji Resolution — pure precedence rules across emoji sets and the custom registry.

Invariants:
    - Custom records always win over any set, for single lookups and listings
    - Single lookup: first registered set containing the shortcode wins
    - Listing: sets are written in registration order, so the LAST set wins on
      collision, then every custom record overwrites
    - A miss is None, never an error

Design Decisions:
    - Pure functions over explicit inputs (sets tuple + registry results):
      the manager awaits the registry, these functions never do IO
"""

from collections.abc import Iterable, Sequence

from emoji_plugin.core.domain_types import CustomEmojiRecord, ResolvedEmoji
from emoji_plugin.core.emoji_sets import EmojiSet


def pick_emoji(
    shortcode: str,
    custom: CustomEmojiRecord | None,
    sets: Sequence[EmojiSet],
) -> ResolvedEmoji | None:
    """Resolve one shortcode given its custom record (if any) and the registered sets."""
    if custom is not None:
        return ResolvedEmoji(
            set=None,
            shortcode=custom.shortcode,
            name=custom.name,
            added_by=custom.added_by,
        )
    for emoji_set in sets:
        name = emoji_set.emoji.get(shortcode)
        if isinstance(name, str):
            return ResolvedEmoji(
                set=emoji_set.display_name, shortcode=shortcode, name=name,
            )
    return None


def merge_emoji_maps(
    sets: Sequence[EmojiSet],
    custom_pairs: Iterable[tuple[str, str]],
) -> dict[str, str]:
    """Build the full shortcode → name listing."""
    merged: dict[str, str] = {}
    for emoji_set in sets:
        merged.update(emoji_set.emoji)
    for shortcode, name in custom_pairs:
        merged[shortcode] = name
    return merged
