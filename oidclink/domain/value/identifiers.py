"""Strongly typed identifiers.

Account ids are integers assigned by the host's user table.
"""

from typing import NewType

UserId = NewType("UserId", int)

# Key of an issuer in OpenIDConnectSettings.issuers
ConfigId = NewType("ConfigId", str)

# Opaque id of a host session (the session cookie value)
SessionId = NewType("SessionId", str)
