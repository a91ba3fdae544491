"""ID Generation.

ULID-based identifiers for builder entities. Prefixes keep logs readable
(``msg_01H...``, ``dep_01H...``).
"""

from typing import NewType
from ulid import ULID

MessageID = NewType("MessageID", str)
"""Chat message identifier"""

DeploymentID = NewType("DeploymentID", str)
"""Mock deployment identifier"""

SessionID = NewType("SessionID", str)
"""Signed-in session identifier"""


class Prefix:
    """ID prefix constants."""

    MESSAGE = "msg"
    DEPLOYMENT = "dep"
    SESSION = "sess"


def generate_raw() -> str:
    """Generate ULID without prefix."""
    return str(ULID())


def generate_prefixed(prefix: str) -> str:
    """Generate ULID with a type prefix."""
    return f"{prefix}_{generate_raw()}"


def new_message_id() -> MessageID:
    return MessageID(generate_prefixed(Prefix.MESSAGE))


def new_deployment_id() -> DeploymentID:
    return DeploymentID(generate_prefixed(Prefix.DEPLOYMENT))


def new_session_id() -> SessionID:
    return SessionID(generate_prefixed(Prefix.SESSION))


def is_valid(id_str: str) -> bool:
    """Check if string is a (optionally prefixed) ULID."""
    ulid_part = id_str.rsplit("_", 1)[-1]
    if len(ulid_part) != 26:
        return False
    try:
        ULID.from_str(ulid_part)
    except ValueError:
        return False
    return True


def extract_prefix(id_str: str) -> str | None:
    """Return the prefix of a prefixed ID, or None."""
    parts = id_str.split("_")
    return parts[0] if len(parts) == 2 else None
