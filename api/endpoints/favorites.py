"""
Per-user favorite albums, stored as a hash keyed by album id.
"""
import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..context import AppContext
from ..dependencies import get_context, require_user_id
from ..errors import error_response, summarize_validation_errors
from ..models import FavoriteAlbum

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/favorites")


def favorites_key(user_id: str) -> str:
    return f"user:{user_id}:favorites"


@router.get("")
async def list_favorites(
    user_id: str = Depends(require_user_id),
    context: AppContext = Depends(get_context),
) -> List[Dict[str, Any]]:
    """All favorites of the user, most recently added first"""
    stored = await context.store.hash_get_all(favorites_key(user_id))
    favorites = [json.loads(value) for value in stored.values()]
    # ISO 8601 timestamps sort chronologically as strings
    favorites.sort(key=lambda fav: fav.get("dateAdded", ""), reverse=True)
    return favorites


@router.post("")
async def add_favorite(
    body: Any = Body(None),
    user_id: str = Depends(require_user_id),
    context: AppContext = Depends(get_context),
):
    try:
        favorite = FavoriteAlbum.model_validate(body)
    except ValidationError as e:
        logger.info(f"Rejected favorite for user {user_id}: {e.error_count()} validation errors")
        return error_response(400, "Invalid favorite data", details=summarize_validation_errors(e.errors()))

    await context.store.hash_set(favorites_key(user_id), favorite.id, favorite.model_dump_json(exclude_none=True))
    return {"success": True}


@router.delete("/{album_id}")
async def remove_favorite(
    album_id: str,
    user_id: str = Depends(require_user_id),
    context: AppContext = Depends(get_context),
):
    await context.store.hash_delete(favorites_key(user_id), album_id)
    return {"success": True}


@router.get("/{album_id}")
async def is_favorite(
    album_id: str,
    user_id: str = Depends(require_user_id),
    context: AppContext = Depends(get_context),
):
    favorite = await context.store.hash_get(favorites_key(user_id), album_id)
    return {"isFavorite": bool(favorite)}
