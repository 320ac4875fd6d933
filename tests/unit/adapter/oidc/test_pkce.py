"""Unit tests for PKCE utilities."""

from base64 import urlsafe_b64decode, urlsafe_b64encode
from hashlib import sha256
import re

from oidclink.adapter.oidc.pkce import generate_pkce_pair


class TestGeneratePkcePair:
    """Tests for generate_pkce_pair function."""

    def test_verifier_is_base64url_encoded(self):
        """Verifier should be a base64url string of 64 random bytes."""
        verifier, _ = generate_pkce_pair()

        assert re.match(r"^[A-Za-z0-9_-]+$", verifier)
        assert len(urlsafe_b64decode(verifier + "==")) == 64

    def test_s256_challenge_is_sha256_of_verifier(self):
        """Challenge should be SHA-256 hash of verifier."""
        verifier, challenge = generate_pkce_pair("S256")

        expected = urlsafe_b64encode(sha256(verifier.encode("ascii")).digest())
        assert challenge == expected.rstrip(b"=").decode("ascii")

    def test_plain_challenge_is_verifier(self):
        verifier, challenge = generate_pkce_pair("plain")

        assert challenge == verifier

    def test_generates_unique_pairs(self):
        """Each call should generate a different verifier."""
        assert generate_pkce_pair()[0] != generate_pkce_pair()[0]
