"""Directory Emoji Set — mapping built from image files in a directory."""

from emoji_plugin.core.emoji_sets import EmojiSet
from emoji_plugin.infrastructure.directory_emoji_set import DirectoryEmojiSet
from tests.fakes import PNG_BYTES


def test_scans_image_files(tmp_path):
    (tmp_path / "smile.png").write_bytes(PNG_BYTES)
    (tmp_path / "wave.GIF").write_bytes(b"GIF89a")
    (tmp_path / "notes.txt").write_text("not an emoji")
    (tmp_path / "sub").mkdir()
    emoji_set = DirectoryEmojiSet(tmp_path, name="local")
    assert emoji_set.name == "local"
    assert emoji_set.emoji == {"smile": "smile.png", "wave": "wave.GIF"}


def test_name_defaults_to_directory_name(tmp_path):
    directory = tmp_path / "twemoji"
    directory.mkdir()
    assert DirectoryEmojiSet(directory).name == "twemoji"


def test_is_a_valid_emoji_set_provider(tmp_path):
    (tmp_path / "ok.png").write_bytes(PNG_BYTES)
    emoji_set = EmojiSet.from_provider(DirectoryEmojiSet(tmp_path))
    assert emoji_set.emoji == {"ok": "ok.png"}
    assert emoji_set.middleware() is not None
