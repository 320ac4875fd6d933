"""Host username rules.

Usernames are page titles in the user namespace, so they follow title
normalization: underscores read as spaces, whitespace collapses, and the
first letter is upper case.
"""

import ipaddress
import re
from enum import Enum

MAX_USERNAME_BYTES = 255

DEFAULT_USERNAME = "User"

# Characters that can never appear in a title
_ILLEGAL_CHARS = re.compile(r"[#<>\[\]|{}\x00-\x1f\x7f\ufffd]")
_PERCENT_ENCODED = re.compile(r"%[0-9A-Fa-f]{2}")
_HTML_ENTITY = re.compile(r"&[A-Za-z0-9\x80-\U0010ffff#]+;")
_RELATIVE_PATH = re.compile(r"^\.\.?$|^\.\.?/|/\.\.?/|/\.\.?$")
_WHITESPACE = re.compile(r"\s+")

# Additionally reserved for names of new accounts
_UNCREATABLE_CHARS = re.compile(r"[@:>=/]")


class UsernameRigor(str, Enum):
    """How strictly a name is checked."""

    # Usable as a title in the user namespace
    VALID = "valid"
    # Usable as the name of a newly created account
    CREATABLE = "creatable"


def _is_ip(name: str) -> bool:
    try:
        ipaddress.ip_address(name)
    except ValueError:
        pass
    else:
        return True
    try:
        ipaddress.ip_network(name, strict=False)
    except ValueError:
        return False
    return True


def canonicalize_username(
    value: str | None, rigor: UsernameRigor = UsernameRigor.VALID
) -> str | None:
    """Normalize a candidate username, or reject it.

    Args:
        value: Candidate name
        rigor: Validation level

    Returns:
        Canonical name, or None if the name is not acceptable
    """
    if value is None:
        return None

    name = _WHITESPACE.sub(" ", value.replace("_", " ")).strip()
    if not name:
        return None

    if (
        _ILLEGAL_CHARS.search(name)
        or _PERCENT_ENCODED.search(name)
        or _HTML_ENTITY.search(name)
        or _RELATIVE_PATH.search(name)
        or "~~~" in name
    ):
        return None

    name = name[0].upper() + name[1:]
    if len(name.encode("utf-8")) > MAX_USERNAME_BYTES:
        return None

    if rigor is UsernameRigor.CREATABLE:
        if _UNCREATABLE_CHARS.search(name) or _is_ip(name):
            return None

    return name
