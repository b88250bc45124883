"""Canned catalogue served by the mock Spotify client"""

import base64
from typing import Any, Dict, List


def _placeholder_image(size: int, label: str, font_size: int) -> str:
    svg = (
        f'<svg width="{size}" height="{size}" xmlns="http://www.w3.org/2000/svg">'
        f'<rect width="{size}" height="{size}" fill="#333333"/>'
        f'<text x="50%" y="50%" font-family="Arial" font-size="{font_size}" fill="#999999" '
        f'text-anchor="middle" dy=".3em">{label}</text></svg>'
    )
    return "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")


# Data URIs work offline
PLACEHOLDER_IMAGE_640 = _placeholder_image(640, "Album Cover", 24)
PLACEHOLDER_IMAGE_300 = _placeholder_image(300, "User", 18)

MOCK_USER: Dict[str, Any] = {
    "id": "mock-user-id",
    "display_name": "Mock User",
    "images": [{"url": PLACEHOLDER_IMAGE_300, "width": 300, "height": 300}],
    "product": "premium",
}

# (album id, album name, artist, [(track id, track name, duration ms), ...])
_CATALOGUE = [
    ("mock-album-1", "Mock Album 1", "Mock Artist", [
        ("mock-track-1", "Mock Track 1", 180000),
        ("mock-track-2", "Mock Track 2", 200000),
        ("mock-track-1-3", "Mock Track 3", 195000),
        ("mock-track-1-4", "Mock Track 4", 220000),
    ]),
    ("mock-album-2", "Jazz Collection", "Smooth Jazz Band", [
        ("mock-track-3", "Jazz Night", 240000),
        ("mock-track-3-2", "Midnight Blues", 255000),
        ("mock-track-3-3", "Smooth Saxophone", 230000),
        ("mock-track-3-4", "City Lights", 245000),
        ("mock-track-3-5", "Evening Breeze", 250000),
    ]),
    ("mock-album-3", "Rock Hits", "Rock Band", [
        ("mock-track-4", "Rock Anthem", 210000),
        ("mock-track-4-2", "Thunder Road", 225000),
        ("mock-track-4-3", "Guitar Solo", 195000),
        ("mock-track-4-4", "Power Chord", 200000),
        ("mock-track-4-5", "Stage Dive", 215000),
        ("mock-track-4-6", "Encore", 240000),
    ]),
    ("mock-album-4", "Electronic Vibes", "DJ Producer", [
        ("mock-track-5", "Electronic Dreams", 195000),
        ("mock-track-5-2", "Bass Drop", 210000),
        ("mock-track-5-3", "Synth Wave", 185000),
        ("mock-track-5-4", "Digital Pulse", 205000),
    ]),
    ("mock-album-5", "Classical Masterpieces", "Orchestra", [
        ("mock-track-6", "Classical Symphony", 300000),
        ("mock-track-6-2", "Moonlight Sonata", 320000),
        ("mock-track-6-3", "Four Seasons", 280000),
        ("mock-track-6-4", "Canon in D", 310000),
        ("mock-track-6-5", "Requiem", 350000),
    ]),
]


def build_mock_devices() -> List[Dict[str, Any]]:
    """Fresh copy of the mock device list"""
    return [
        {
            "id": "mock-web-player",
            "name": "Mock Web Player",
            "type": "Computer",
            "is_active": True,
            "is_private_session": False,
            "is_restricted": False,
            "volume_percent": 50,
            "supports_volume": True,
        },
        {
            "id": "mock-phone",
            "name": "Mock Phone",
            "type": "Smartphone",
            "is_active": False,
            "is_private_session": False,
            "is_restricted": False,
            "volume_percent": 75,
            "supports_volume": True,
        },
    ]


def build_mock_tracks() -> List[Dict[str, Any]]:
    """Fresh copy of the mock track list, grouped by album"""
    tracks = []
    for album_id, album_name, artist, album_tracks in _CATALOGUE:
        for track_id, track_name, duration_ms in album_tracks:
            tracks.append({
                "id": track_id,
                "name": track_name,
                "artists": [{"name": artist}],
                "album": {
                    "id": album_id,
                    "name": album_name,
                    "images": [{"url": PLACEHOLDER_IMAGE_640, "width": 640, "height": 640}],
                },
                "uri": f"spotify:track:{track_id}",
                "duration_ms": duration_ms,
            })
    return tracks


def build_mock_albums(tracks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Derive one album entry per distinct album in tracks, first-seen order"""
    albums: Dict[str, Dict[str, Any]] = {}
    for track in tracks:
        album_id = track["album"]["id"]
        if album_id in albums:
            continue
        albums[album_id] = {
            "id": album_id,
            "name": track["album"]["name"],
            "artists": track["artists"],
            "images": track["album"]["images"],
            "uri": f"spotify:album:{album_id}",
            "release_date": "2024-01-01",
            "total_tracks": sum(1 for t in tracks if t["album"]["id"] == album_id),
        }
    return list(albums.values())
