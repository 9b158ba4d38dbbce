"""Shortcode Enforcement — validates shortcodes before they become storage keys.

Invariants:
    - Pure: no IO, no async
    - A valid shortcode is a non-empty str of word characters, "+" or "-"
    - The first violation wins
"""

import re

from emoji_plugin.core.errors import ErrorContext, InvalidArgumentError

MAX_SHORTCODE_LENGTH = 64
SHORTCODE_PATTERN = re.compile(r"^[\w+\-]+$")


def validate_shortcode(shortcode: object) -> str:
    """Return `shortcode` unchanged or raise InvalidArgumentError."""
    if not isinstance(shortcode, str):
        raise InvalidArgumentError("shortcode: Expected a string", "shortcode")
    ctx = ErrorContext(shortcode=shortcode)
    if not shortcode:
        raise InvalidArgumentError("shortcode: Must not be empty", "shortcode", ctx)
    if len(shortcode) > MAX_SHORTCODE_LENGTH:
        raise InvalidArgumentError(
            f"shortcode: Must be at most {MAX_SHORTCODE_LENGTH} characters",
            "shortcode", ctx,
        )
    if not SHORTCODE_PATTERN.match(shortcode):
        raise InvalidArgumentError(
            "shortcode: Only letters, digits, '_', '+' and '-' are allowed",
            "shortcode", ctx,
        )
    return shortcode
