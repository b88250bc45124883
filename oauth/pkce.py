"""PKCE (Proof Key for Code Exchange) generation"""

import base64
import hashlib
import secrets

from .models import PkceChallenge

# 96 random bytes encode to a 128 character verifier, the RFC 7636 maximum
VERIFIER_BYTES = 96
STATE_BYTES = 16


def _base64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('utf-8').rstrip('=')


def generate_pkce() -> PkceChallenge:
    """Generate PKCE code verifier and challenge

    Returns:
        PkceChallenge with a base64url verifier and its S256 challenge
    """
    code_verifier = _base64url(secrets.token_bytes(VERIFIER_BYTES))

    # Create code_challenge using SHA-256
    challenge_bytes = hashlib.sha256(code_verifier.encode('utf-8')).digest()
    code_challenge = _base64url(challenge_bytes)

    return PkceChallenge(verifier=code_verifier, challenge=code_challenge)


def generate_state() -> str:
    """Generate the opaque state token that keys a stored verifier"""
    return secrets.token_hex(STATE_BYTES)


def pkce_key(state: str) -> str:
    """Token store key for the verifier belonging to state"""
    return f"pkce:{state}"
