"""Emoji Routes — read endpoints over the installed EmojiManager.

Invariants:
    - GET /api/v1/emoji returns the merged listing (sets, then custom emoji)
    - GET /api/v1/emoji/{shortcode} returns the resolved emoji or 404
    - Uploads and deletions are host-initiated calls on the manager, not routes here
"""

import logging

from fastapi import APIRouter, Depends, Request

from emoji_plugin.core.errors import FeatureDisabledError, ResourceNotFoundError
from emoji_plugin.schemas.emoji import EmojiListResponse, EmojiResponse
from emoji_plugin.services.emoji_manager import EmojiManager

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/emoji", tags=["emoji"])


def get_emoji_manager(request: Request) -> EmojiManager:
    """FastAPI dependency resolving the manager installed on the host."""
    host = getattr(request.app.state, "host", None)
    manager = getattr(host, "emoji", None)
    if manager is None:
        raise FeatureDisabledError("Emoji")
    return manager


@router.get("", response_model=EmojiListResponse)
async def list_emoji(manager: EmojiManager = Depends(get_emoji_manager)):
    """List every shortcode with its name."""
    return EmojiListResponse(emoji=await manager.list_emoji())


@router.get("/{shortcode}", response_model=EmojiResponse)
async def get_emoji(
    shortcode: str, manager: EmojiManager = Depends(get_emoji_manager),
):
    """Resolve one shortcode."""
    emoji = await manager.get_emoji(shortcode)
    if emoji is None:
        raise ResourceNotFoundError("Emoji", shortcode)
    return EmojiResponse.from_resolved(emoji)
