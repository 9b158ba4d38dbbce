"""Directory Emoji Set — an emoji set backed by a directory of image files.

Invariants:
    - shortcode is the file stem, name is the file name (e.g. "smile" → "smile.png")
    - Only files whose extension is a known image extension are included
    - The mapping is read once at construction; later files are not picked up
"""

from pathlib import Path

from starlette.staticfiles import StaticFiles
from starlette.types import ASGIApp

from emoji_plugin.core.image_sniffer import MIME_BY_EXT


class DirectoryEmojiSet:
    """Emoji set provider serving the images of a local directory."""

    def __init__(
        self, directory: str | Path, name: str | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.name = name if name is not None else self.directory.name
        self.emoji = self._scan(self.directory)

    @staticmethod
    def _scan(directory: Path) -> dict[str, str]:
        emoji: dict[str, str] = {}
        for path in sorted(directory.iterdir()):
            ext = path.suffix.lstrip(".").lower()
            if path.is_file() and ext in MIME_BY_EXT:
                emoji.setdefault(path.stem, path.name)
        return emoji

    def middleware(self) -> ASGIApp:
        return StaticFiles(directory=self.directory)
