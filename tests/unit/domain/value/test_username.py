"""Unit tests for username canonicalization."""

import pytest

from oidclink.domain.value import (
    MAX_USERNAME_BYTES,
    UsernameRigor,
    canonicalize_username,
)


class TestCanonicalizeUsername:
    """Tests for canonicalize_username()."""

    def test_uppercases_first_letter(self):
        """Should upper-case the first character only."""
        assert canonicalize_username("jane") == "Jane"
        assert canonicalize_username("jANE") == "JANE"

    def test_underscores_become_spaces(self):
        """Should read underscores as spaces."""
        assert canonicalize_username("jane_doe") == "Jane doe"

    def test_collapses_whitespace(self):
        """Should collapse runs of whitespace and strip the ends."""
        assert canonicalize_username("  jane \t  doe ") == "Jane doe"

    @pytest.mark.parametrize("value", [None, "", "   ", "___"])
    def test_rejects_empty(self, value):
        """Should reject names that are empty after normalization."""
        assert canonicalize_username(value) is None

    @pytest.mark.parametrize(
        "value",
        [
            "Jane#1",
            "<Jane>",
            "Jane[1]",
            "Jane|Doe",
            "Jane{x}",
            "Jane\x00",
            "Jane%20Doe",
            "Jane&amp;Doe",
            "..",
            "./Jane",
            "Jane/../Doe",
            "Jane~~~",
        ],
    )
    def test_rejects_illegal_titles(self, value):
        """Should reject names that cannot be titles."""
        assert canonicalize_username(value) is None

    def test_rejects_names_over_byte_limit(self):
        """Should measure the limit in UTF-8 bytes."""
        assert canonicalize_username("a" * MAX_USERNAME_BYTES) is not None
        assert canonicalize_username("a" * (MAX_USERNAME_BYTES + 1)) is None
        # Two bytes per character
        assert canonicalize_username("é" * (MAX_USERNAME_BYTES // 2 + 1)) is None

    @pytest.mark.parametrize(
        "value", ["jane@example.org", "Jane:Doe", "a=b", "a/b", "127.0.0.1", "10.0.0.0/8"]
    )
    def test_creatable_rejects_reserved_names(self, value):
        """New accounts cannot use reserved characters or IP addresses."""
        assert canonicalize_username(value, UsernameRigor.CREATABLE) is None

    def test_valid_accepts_email_like_names(self):
        """An @ is fine for an existing title."""
        assert canonicalize_username("jane@example.org") == "Jane@example.org"

    def test_creatable_accepts_uuid(self):
        """Random UUID names are creatable."""
        name = canonicalize_username(
            "0b9e6a8c-7d3e-4f1a-9c2b-5e8d7f6a4b3c", UsernameRigor.CREATABLE
        )
        assert name == "0b9e6a8c-7d3e-4f1a-9c2b-5e8d7f6a4b3c"
