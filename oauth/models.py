"""Data models for Spotify OAuth and session state"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ClientCredentials:
    """Spotify application credentials

    Attributes:
        client_id: Application client identifier
        client_secret: Application client secret
        redirect_uri: Registered callback URL
    """
    client_id: str
    client_secret: str
    redirect_uri: str


@dataclass(frozen=True)
class PkceChallenge:
    """PKCE (Proof Key for Code Exchange) pair for one login attempt

    Attributes:
        verifier: High-entropy secret kept server-side, keyed by state
        challenge: S256 transform of the verifier, sent to the provider
    """
    verifier: str
    challenge: str


@dataclass(frozen=True)
class TokenPair:
    """Token response from the Spotify accounts service

    Attributes:
        access_token: Bearer token for resource calls
        refresh_token: Token for minting new access tokens; None when the
            provider omitted it (refresh responses only)
        expires_in: Access token lifetime in seconds
        token_type: Usually "Bearer"
    """
    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    token_type: str = "Bearer"

    @classmethod
    def from_response(cls, payload: Dict[str, Any]) -> "TokenPair":
        """Build from the provider's JSON payload

        Raises:
            KeyError: If access_token is absent
        """
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token") or None,
            expires_in=int(payload.get("expires_in", 3600)),
            token_type=payload.get("token_type", "Bearer"),
        )


@dataclass(frozen=True)
class SessionRecord:
    """Server-side binding of a user to their current tokens

    Attributes:
        user_id: Spotify user id
        access_token: Current access token
        refresh_token: Current refresh token
        token_expires_at_ms: Access token expiry, epoch milliseconds
    """
    user_id: str
    access_token: Optional[str]
    refresh_token: Optional[str]
    token_expires_at_ms: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the session cookie"""
        return {
            "userId": self.user_id,
            "accessToken": self.access_token,
            "refreshToken": self.refresh_token,
            "tokenExpires": self.token_expires_at_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["SessionRecord"]:
        """Deserialize from the session cookie

        Returns:
            SessionRecord, or None if the payload has no user id
        """
        if not isinstance(data, dict) or not data.get("userId"):
            return None
        expires = data.get("tokenExpires")
        return cls(
            user_id=data["userId"],
            access_token=data.get("accessToken"),
            refresh_token=data.get("refreshToken"),
            token_expires_at_ms=int(expires) if expires is not None else None,
        )
