"""Errors raised by Spotify resource calls"""

from typing import Optional

# Client-facing message per operation name
FAILURE_MESSAGES = {
    "Search": "Search failed",
    "Get devices": "Failed to get devices",
    "Transfer playback": "Failed to transfer playback",
    "Get album": "Failed to get album",
    "Start playback": "Failed to start playback",
    "Pause playback": "Failed to pause playback",
    "Get playback state": "Failed to get playback state",
    "Skip to next": "Failed to skip to next",
    "Skip to previous": "Failed to skip to previous",
    "Set volume": "Failed to set volume",
}


class SpotifyApiError(Exception):
    """A Spotify Web API call returned a non-success response

    Attributes:
        operation: Human readable name of the failed call
        status_code: HTTP status, None on transport failure
        body: Raw response body (or transport error text)
    """

    def __init__(self, operation: str, status_code: Optional[int], body: str):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(f"{operation} failed (HTTP {status_code}): {body}")

    @property
    def failure_message(self) -> str:
        """Message returned to the browser for this failure"""
        return FAILURE_MESSAGES.get(self.operation, f"{self.operation} failed")
