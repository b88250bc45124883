"""Authentication and session error taxonomy

Every error here is terminal for the request that raised it; nothing is
retried internally.
"""

from typing import Optional


class FlipSideAuthError(Exception):
    """Base class for authentication and session failures"""


class NotAuthenticatedError(FlipSideAuthError):
    """No session, or the session carries no access token"""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class InvalidOrExpiredStateError(FlipSideAuthError):
    """The PKCE state is unknown, already consumed or expired"""

    def __init__(self, message: str = "Invalid or expired state parameter"):
        super().__init__(message)


class MissingAuthorizationCodeError(FlipSideAuthError):
    """The provider redirected back without an authorization code"""

    def __init__(self, message: str = "Missing authorization code"):
        super().__init__(message)


class ProviderResponseError(FlipSideAuthError):
    """A provider call failed; keeps the upstream status code and raw body

    Attributes:
        status_code: HTTP status from the provider, None on transport failure
        body: Raw response body (or transport error text)
    """

    action = "Provider request"

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"{self.action} failed: {body}"
        else:
            message = f"{self.action} failed ({status_code}): {body}"
        super().__init__(message)


class AuthExchangeError(ProviderResponseError):
    """Authorization code could not be exchanged for tokens"""

    action = "Token exchange"


class AuthRefreshError(ProviderResponseError):
    """Refresh token could not be exchanged for a new access token"""

    action = "Token refresh"


class ProfileFetchError(ProviderResponseError):
    """User profile could not be fetched with a fresh access token"""

    action = "Profile fetch"


class SessionPersistError(FlipSideAuthError):
    """Session record did not read back after being written"""

    def __init__(self, message: str = "Failed to store session data"):
        super().__init__(message)
