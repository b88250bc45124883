"""
Pydantic models for request validation.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class TransferPlaybackRequest(BaseModel):
    """Move playback to another device"""
    deviceId: str
    play: bool = True


class PlaybackOffset(BaseModel):
    """Position in the context to start from"""
    position: int = Field(ge=0)


class PlayRequest(BaseModel):
    """Start or resume playback"""
    deviceId: Optional[str] = None
    uris: Optional[List[str]] = None
    offset: Optional[PlaybackOffset] = None
    # Spotify's own field name, passed through unchanged
    position_ms: Optional[int] = Field(default=None, ge=0)


class PauseRequest(BaseModel):
    deviceId: Optional[str] = None


class VolumeRequest(BaseModel):
    deviceId: Optional[str] = None
    volume: float = Field(ge=0, le=100)


class ArtistRef(BaseModel):
    name: str


class ImageRef(BaseModel):
    url: str


class FavoriteAlbumInfo(BaseModel):
    """Album snapshot stored with a favorite"""
    id: str
    name: str
    artists: List[ArtistRef]
    images: List[ImageRef]
    release_date: str
    total_tracks: Optional[int] = None


class FavoriteAlbum(BaseModel):
    """Favorite entry as sent by the frontend"""
    id: str
    album: FavoriteAlbumInfo
    dateAdded: str
