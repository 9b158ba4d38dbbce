"""Emoji Manager — resolution precedence and the custom emoji lifecycle.

Tests cover:
    - get_emoji / list_emoji precedence across sets and custom emoji
    - add_custom_emoji: storage key, record, event, permission and input failures
    - delete_custom_emoji: record removal, event, silent miss, permission failure
    - known gap: a duplicate add leaves the newly written image orphaned
"""

import io

import pytest
from starlette.datastructures import UploadFile

from emoji_plugin.core.domain_types import ResolvedEmoji
from emoji_plugin.core.errors import (
    ConflictError, EmptyInputError, FeatureDisabledError, ForbiddenError,
    InvalidArgumentError, InvalidInputKindError, NotAnImageError,
)
from emoji_plugin.services.emoji_manager import EmojiManager
from tests.fakes import (
    FailingStream, FakeEmojiSet, FakeUser, GIF_BYTES, NOT_AN_IMAGE, PNG_BYTES,
    SetWithoutMiddleware, chunked,
)


async def _read(store, key) -> bytes:
    return b"".join([chunk async for chunk in await store.open_read(key)])


# ─── Emoji sets ──────────────────────────────────────────────────

def test_use_emoji_set_returns_manager_for_chaining(manager):
    result = manager.use_emoji_set(FakeEmojiSet({"a": "a.png"}, name="one")) \
        .use_emoji_set(FakeEmojiSet({"b": "b.png"}, name="two"))
    assert result is manager
    assert [s.name for s in manager.emoji_sets] == ["one", "two"]


def test_use_emoji_set_without_middleware_fails(manager):
    with pytest.raises(InvalidArgumentError):
        manager.use_emoji_set(SetWithoutMiddleware())
    assert manager.emoji_sets == ()


# ─── Resolution ──────────────────────────────────────────────────

async def test_first_set_wins_lookup_last_set_wins_listing(manager):
    manager.use_emoji_set(FakeEmojiSet({"smile": "s1.png"}, name="s1"))
    manager.use_emoji_set(FakeEmojiSet({"smile": "s2.png"}, name="s2"))

    emoji = await manager.get_emoji("smile")
    assert emoji == ResolvedEmoji(set="s1", shortcode="smile", name="s1.png")
    assert (await manager.list_emoji())["smile"] == "s2.png"


async def test_custom_emoji_wins_lookup_and_listing(manager, admin):
    manager.use_emoji_set(FakeEmojiSet({"smile": "set-smile.png"}, name="set"))
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)

    emoji = await manager.get_emoji("smile")
    assert emoji.set is None
    assert emoji.name == "smile.png"
    assert (await manager.list_emoji())["smile"] == "smile.png"


async def test_get_emoji_miss_returns_none(manager):
    assert await manager.get_emoji("nothing") is None


async def test_list_emoji_merges_sets_and_custom(manager, admin):
    manager.use_emoji_set(FakeEmojiSet({"wave": "wave.png"}))
    await manager.add_custom_emoji(admin, "party", GIF_BYTES)
    assert await manager.list_emoji() == {"wave": "wave.png", "party": "party.gif"}


# ─── add_custom_emoji ────────────────────────────────────────────

async def test_add_round_trip(manager, admin, store, events):
    added = await manager.add_custom_emoji(admin, "smile", PNG_BYTES)

    assert added == ResolvedEmoji(set=None, shortcode="smile", name="smile.png", added_by=admin)
    assert await _read(store, "smile.png") == PNG_BYTES
    assert await manager.get_emoji("smile") == ResolvedEmoji(
        set=None, shortcode="smile", name="smile.png", added_by="u-admin",
    )
    assert events.events == [
        ("emoji:add", {"shortcode": "smile", "name": "smile.png", "addedBy": "u-admin"}),
    ]
    assert admin.checked == ["emoji.add"]


async def test_add_keeps_numeric_user_id_type(manager, events):
    user = FakeUser(42, {"emoji.add"})
    await manager.add_custom_emoji(user, "smile", PNG_BYTES)

    assert (await manager.get_emoji("smile")).added_by == 42
    assert events.events[0][1]["addedBy"] == "42"


async def test_add_from_stream(manager, admin, store):
    await manager.add_custom_emoji(admin, "wave", chunked(GIF_BYTES[:10], GIF_BYTES[10:]))
    assert await _read(store, "wave.gif") == GIF_BYTES


async def test_add_from_binary_file(manager, admin, store):
    await manager.add_custom_emoji(admin, "file", io.BytesIO(PNG_BYTES))
    assert await _read(store, "file.png") == PNG_BYTES


async def test_add_from_upload_file(manager, admin, store):
    upload = UploadFile(io.BytesIO(GIF_BYTES), filename="party.gif")
    await manager.add_custom_emoji(admin, "party", upload)
    assert await _read(store, "party.gif") == GIF_BYTES


async def test_add_without_user_skips_permission_check(manager, events):
    added = await manager.add_custom_emoji(None, "bot", PNG_BYTES)
    assert added.added_by is None
    assert (await manager.get_emoji("bot")).added_by is None
    assert events.events[0][1]["addedBy"] is None


async def test_add_without_store_is_disabled(registry, events, admin):
    manager = EmojiManager(registry, events)
    with pytest.raises(FeatureDisabledError):
        await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    assert admin.checked == []


async def test_add_forbidden_mutates_nothing(manager, guest, store, events):
    with pytest.raises(ForbiddenError):
        await manager.add_custom_emoji(guest, "smile", PNG_BYTES)
    assert store.keys() == []
    assert await manager.get_emoji("smile") is None
    assert events.events == []


async def test_add_non_string_shortcode(manager, admin):
    with pytest.raises(InvalidArgumentError):
        await manager.add_custom_emoji(admin, 123, PNG_BYTES)


async def test_add_not_an_image_creates_no_record(manager, admin, store, events):
    with pytest.raises(NotAnImageError):
        await manager.add_custom_emoji(admin, "zeros", NOT_AN_IMAGE)
    assert await manager.get_emoji("zeros") is None
    assert store.keys() == []
    assert events.events == []


async def test_add_invalid_input_kind(manager, admin):
    with pytest.raises(InvalidInputKindError):
        await manager.add_custom_emoji(admin, "smile", "not bytes")


async def test_add_empty_input(manager, admin):
    with pytest.raises(EmptyInputError):
        await manager.add_custom_emoji(admin, "smile", b"")


async def test_add_failed_write_creates_no_record(manager, admin, store, events):
    with pytest.raises(ConnectionResetError):
        await manager.add_custom_emoji(admin, "smile", FailingStream(PNG_BYTES))
    assert store.keys() == []
    assert await manager.get_emoji("smile") is None
    assert events.events == []


async def test_add_duplicate_conflicts_and_keeps_first(manager, admin, events):
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    with pytest.raises(ConflictError):
        await manager.add_custom_emoji(admin, "smile", GIF_BYTES)

    emoji = await manager.get_emoji("smile")
    assert emoji.name == "smile.png"
    assert [topic for topic, _ in events.events] == ["emoji:add"]


async def test_duplicate_add_leaves_orphaned_image(manager, admin, store):
    """Known gap: the image is written before the registry rejects the shortcode."""
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    with pytest.raises(ConflictError):
        await manager.add_custom_emoji(admin, "smile", GIF_BYTES)
    assert sorted(store.keys()) == ["smile.gif", "smile.png"]


# ─── delete_custom_emoji ─────────────────────────────────────────

async def test_delete_removes_record_and_publishes(manager, admin, store, events):
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    await manager.delete_custom_emoji(admin, "smile")

    assert await manager.get_emoji("smile") is None
    assert events.events[-1] == ("emoji:remove", {"shortcode": "smile", "user": "u-admin"})
    # the stored image is not deleted
    assert "smile.png" in store


async def test_delete_falls_back_to_set_emoji(manager, admin):
    manager.use_emoji_set(FakeEmojiSet({"smile": "set-smile.png"}, name="set"))
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    await manager.delete_custom_emoji(admin, "smile")
    assert (await manager.get_emoji("smile")).set == "set"


async def test_delete_missing_is_silent(manager, admin, events):
    await manager.delete_custom_emoji(admin, "nothing")
    assert events.events == []


async def test_delete_without_user(manager, events):
    await manager.add_custom_emoji(None, "bot", PNG_BYTES)
    await manager.delete_custom_emoji(None, "bot")
    assert events.events[-1] == ("emoji:remove", {"shortcode": "bot", "user": None})


async def test_delete_forbidden_mutates_nothing(manager, admin, guest, events):
    await manager.add_custom_emoji(admin, "smile", PNG_BYTES)
    with pytest.raises(ForbiddenError):
        await manager.delete_custom_emoji(guest, "smile")
    assert await manager.get_emoji("smile") is not None
    assert [topic for topic, _ in events.events] == ["emoji:add"]
    assert guest.checked == ["emoji.remove"]
