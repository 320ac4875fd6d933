"""PKCE (Proof Key for Code Exchange) utilities."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256


def generate_pkce_pair(method: str = "S256") -> tuple[str, str]:
    """Generate PKCE verifier and challenge.

    Args:
        method: Challenge method, "S256" or "plain"

    Returns:
        Tuple of (verifier, challenge), both base64url encoded strings
    """
    verifier_bytes = secrets.token_bytes(64)
    verifier = urlsafe_b64encode(verifier_bytes).rstrip(b"=").decode("ascii")

    if method == "plain":
        return (verifier, verifier)

    challenge_bytes = sha256(verifier.encode("ascii")).digest()
    challenge = urlsafe_b64encode(challenge_bytes).rstrip(b"=").decode("ascii")

    return (verifier, challenge)
