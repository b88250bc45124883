"""
Spotify Web API passthrough endpoints (search, albums, devices, playback).
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from settings import ALBUM_CACHE_TTL_SECONDS, SEARCH_CACHE_TTL_SECONDS
from spotify.errors import SpotifyApiError
from ..context import AppContext
from ..dependencies import get_context, require_access_token
from ..errors import error_response
from ..models import PauseRequest, PlayRequest, TransferPlaybackRequest, VolumeRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spotify")

NO_ACTIVE_DEVICE_MESSAGE = "No active device found. Please open Spotify on a device first."
PREMIUM_REQUIRED_MESSAGE = "Premium account required for playback control."


def search_cache_key(query: str, search_type: str, limit: int) -> str:
    return f"search:{query}:{search_type}:{limit}"


def album_cache_key(album_id: str) -> str:
    return f"album:{album_id}"


@router.get("/search")
async def search(
    q: str = Query(..., min_length=1),
    search_type: str = Query("track", alias="type"),
    limit: int = Query(20, ge=1, le=50),
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    """Search the catalogue, cached briefly per query"""
    cache_key = search_cache_key(q, search_type, limit)
    cached = await context.store.get(cache_key)
    if cached:
        logger.debug(f"Search cache hit: {cache_key}")
        return json.loads(cached)

    results = await context.provider.search(access_token, q, search_type, limit)
    await context.store.set_with_ttl(cache_key, json.dumps(results), SEARCH_CACHE_TTL_SECONDS)
    return results


@router.get("/devices")
async def devices(
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    return await context.provider.get_devices(access_token)


@router.put("/transfer-playback")
async def transfer_playback(
    payload: TransferPlaybackRequest,
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    await context.provider.transfer_playback(access_token, payload.deviceId, payload.play)
    return {"success": True}


@router.get("/albums/{album_id}")
async def album(
    album_id: str,
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    """Album with its tracks, cached per album id"""
    cache_key = album_cache_key(album_id)
    cached = await context.store.get(cache_key)
    if cached:
        return json.loads(cached)

    result = await context.provider.get_album(access_token, album_id)
    await context.store.set_with_ttl(cache_key, json.dumps(result), ALBUM_CACHE_TTL_SECONDS)
    return result


@router.put("/play")
async def play(
    payload: PlayRequest,
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    """Start or resume playback

    A 404 from Spotify means no active device, a 403 means the account
    is not Premium. Both are passed on with a readable message.
    """
    offset = payload.offset.model_dump() if payload.offset else None
    try:
        await context.provider.start_playback(
            access_token,
            device_id=payload.deviceId,
            uris=payload.uris,
            offset=offset,
            position_ms=payload.position_ms,
        )
    except SpotifyApiError as e:
        logger.error(f"Start playback failed: {e}")
        if e.status_code == 404:
            return error_response(404, NO_ACTIVE_DEVICE_MESSAGE)
        if e.status_code == 403:
            return error_response(403, PREMIUM_REQUIRED_MESSAGE)
        return error_response(
            500,
            e.failure_message,
            details=str(e) if e.status_code is not None else None,
        )

    return {"success": True}


@router.put("/pause")
async def pause(
    payload: Optional[PauseRequest] = None,
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    device_id = payload.deviceId if payload else None
    await context.provider.pause_playback(access_token, device_id)
    return {"success": True}


@router.get("/state")
async def playback_state(
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    """Current playback state, null when nothing is playing"""
    return await context.provider.get_playback_state(access_token)


@router.post("/next")
async def next_track(
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    await context.provider.next_track(access_token)
    return {"success": True}


@router.post("/previous")
async def previous_track(
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    await context.provider.previous_track(access_token)
    return {"success": True}


@router.put("/volume")
async def volume(
    payload: VolumeRequest,
    access_token: str = Depends(require_access_token),
    context: AppContext = Depends(get_context),
):
    # Spotify only accepts whole percentages
    await context.provider.set_volume(access_token, round(payload.volume), payload.deviceId)
    return {"success": True}
