"""Emoji Manager — resolution, custom emoji upload/delete, and the serving chain.

Invariants:
    - Custom emoji disabled (FeatureDisabledError) when no blob store is configured
    - A None acting user skips permission checks (system-initiated operations)
    - add: sniff → blob write → registry create → publish, each awaited in order;
      nothing reaches the registry unless the blob write completed
    - delete: a missing shortcode is a silent no-op that publishes nothing
    - The stored blob is never deleted by delete_custom_emoji
    - The registry keeps the raw user id; events and logs carry it as a string

Design Decisions:
    - Has-a dispatch chain: the manager owns an ordered handler sequence and exposes
      it as one ASGI app instead of subclassing a router
    - Registered sets are an immutable tuple replaced on each registration;
      resolution functions receive it explicitly
    - No compensation when registry create fails after the blob write: the blob is
      left orphaned and logged at WARNING
"""

import logging
from typing import Any

from starlette.types import ASGIApp

from emoji_plugin.core.domain_types import EventTopic, Permission, ResolvedEmoji
from emoji_plugin.core.emoji_resolution import merge_emoji_maps, pick_emoji
from emoji_plugin.core.emoji_sets import EmojiSet, register_emoji_set
from emoji_plugin.core.enforce_shortcode import validate_shortcode
from emoji_plugin.core.errors import (
    ConflictError, ErrorContext, FeatureDisabledError, ForbiddenError,
)
from emoji_plugin.core.image_sniffer import sniff_image
from emoji_plugin.core.repository_protocols import (
    ActingUser, BlobStore, CustomEmojiRegistry, EmojiSetProvider, EventBus,
)
from emoji_plugin.services.emoji_serving import DispatchChain, custom_emoji_handler

logger = logging.getLogger(__name__)


def _user_id(user: ActingUser | None) -> str | None:
    return str(user.id) if user is not None else None


async def assert_permission(user: ActingUser, permission: Permission) -> None:
    """Raise ForbiddenError unless `user` holds `permission`."""
    if not await user.can(permission.value):
        logger.warning(
            f"Permission denied: {permission.value}",
            extra={"user_id": _user_id(user)},
        )
        raise ForbiddenError(
            permission.value, ErrorContext(user_id=_user_id(user)),
        )


class EmojiManager:
    """Resolves emoji across sets and the custom registry; manages custom emoji."""

    def __init__(
        self,
        registry: CustomEmojiRegistry,
        events: EventBus,
        store: BlobStore | None = None,
    ) -> None:
        self.registry = registry
        self.events = events
        self.store = store
        self._emoji_sets: tuple[EmojiSet, ...] = ()
        self._chain = DispatchChain()
        if store is not None:
            self._chain.append(custom_emoji_handler(store))

    @property
    def emoji_sets(self) -> tuple[EmojiSet, ...]:
        return self._emoji_sets

    @property
    def asgi_app(self) -> ASGIApp:
        """Single entry point serving custom emoji images, then each set's files."""
        return self._chain

    def use_emoji_set(self, provider: EmojiSetProvider) -> "EmojiManager":
        """Register an emoji set provider. Returns self for chaining."""
        emoji_set = EmojiSet.from_provider(provider)
        self._chain.append(emoji_set.middleware())
        self._emoji_sets = register_emoji_set(self._emoji_sets, emoji_set)
        logger.info(
            f"Registered emoji set with {len(emoji_set.emoji)} emoji",
            extra={"emoji_set": emoji_set.display_name},
        )
        return self

    # ─── Resolution ─────────────────────────────────────────────

    async def get_emoji(self, shortcode: str) -> ResolvedEmoji | None:
        """Resolve one shortcode: custom registry first, then sets in order."""
        custom = await self.registry.find_one(shortcode)
        return pick_emoji(shortcode, custom, self._emoji_sets)

    async def list_emoji(self) -> dict[str, str]:
        """All shortcodes: sets (last registered wins), then custom emoji."""
        custom_pairs = await self.registry.list_pairs()
        return merge_emoji_maps(self._emoji_sets, custom_pairs)

    # ─── Custom emoji lifecycle ─────────────────────────────────

    async def add_custom_emoji(
        self, user: ActingUser | None, shortcode: str, image: Any,
    ) -> ResolvedEmoji:
        """Validate, store and register a custom emoji image."""
        if self.store is None:
            raise FeatureDisabledError()
        if user is not None:
            await assert_permission(user, Permission.EMOJI_ADD)
        validate_shortcode(shortcode)

        image_stream = await sniff_image(image)
        name = f"{shortcode}.{image_stream.ext}"
        try:
            async with self.store.open_write(name) as sink:
                async for chunk in image_stream:
                    await sink.write(chunk)
        finally:
            await image_stream.aclose()

        added_by = _user_id(user)
        try:
            await self.registry.create(
                shortcode, name, user.id if user is not None else None,
            )
        except ConflictError:
            logger.warning(
                "Registry rejected custom emoji; stored image left orphaned",
                extra={"shortcode": shortcode, "emoji_key": name},
            )
            raise

        await self.events.publish(EventTopic.EMOJI_ADD.value, {
            "shortcode": shortcode,
            "name": name,
            "addedBy": added_by,
        })
        logger.info(
            "Added custom emoji",
            extra={"shortcode": shortcode, "emoji_key": name, "user_id": added_by},
        )
        return ResolvedEmoji(
            set=None, shortcode=shortcode, name=name, added_by=user,
        )

    async def delete_custom_emoji(
        self, user: ActingUser | None, shortcode: str,
    ) -> None:
        """Remove a custom emoji record. Missing shortcodes are ignored."""
        if user is not None:
            await assert_permission(user, Permission.EMOJI_REMOVE)
        record = await self.registry.find_one(shortcode)
        if record is None:
            return
        await self.registry.remove(shortcode)
        await self.events.publish(EventTopic.EMOJI_REMOVE.value, {
            "shortcode": shortcode,
            "user": _user_id(user),
        })
        logger.info(
            "Removed custom emoji",
            extra={"shortcode": shortcode, "user_id": _user_id(user)},
        )
