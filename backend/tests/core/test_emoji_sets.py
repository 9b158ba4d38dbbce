"""Emoji Sets — provider validation and immutable registration."""

import pytest

from emoji_plugin.core.emoji_sets import EmojiSet, register_emoji_set
from emoji_plugin.core.errors import InvalidArgumentError
from tests.fakes import FakeEmojiSet, SetWithoutMiddleware


def test_from_provider_snapshots_mapping():
    mapping = {"smile": "smile.png"}
    emoji_set = EmojiSet.from_provider(FakeEmojiSet(mapping, name="twemoji"))
    mapping["later"] = "later.png"
    assert emoji_set.name == "twemoji"
    assert dict(emoji_set.emoji) == {"smile": "smile.png"}


def test_from_provider_mapping_is_read_only():
    emoji_set = EmojiSet.from_provider(FakeEmojiSet({"smile": "smile.png"}))
    with pytest.raises(TypeError):
        emoji_set.emoji["smile"] = "other.png"


def test_missing_name_defaults_to_unknown():
    emoji_set = EmojiSet.from_provider(FakeEmojiSet({}))
    assert emoji_set.name is None
    assert emoji_set.display_name == "unknown"


def test_provider_without_middleware_is_rejected():
    with pytest.raises(InvalidArgumentError, match="middleware"):
        EmojiSet.from_provider(SetWithoutMiddleware())


def test_provider_without_mapping_is_rejected():
    class NoMapping:
        emoji = ["smile"]

        def middleware(self):
            return None

    with pytest.raises(InvalidArgumentError, match="mapping"):
        EmojiSet.from_provider(NoMapping())


def test_register_returns_new_tuple_in_order():
    first = EmojiSet.from_provider(FakeEmojiSet({}, name="a"))
    second = EmojiSet.from_provider(FakeEmojiSet({}, name="b"))
    sets = register_emoji_set((), first)
    both = register_emoji_set(sets, second)
    assert sets == (first,)
    assert [s.name for s in both] == ["a", "b"]
