"""ID Generation System.

ULID-based identifiers for sessions, task queues and id-table entries.

Design:
- K-sortable: ids of one kind sort by creation time
- Prefixed: type-specific prefixes make logs readable (sess_*, tq_*, obj_*)
- Opaque to the client: nothing about the server object leaks through an id
"""

from typing import NewType
from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

SessionID = NewType("SessionID", str)
"""User session identifier"""

TaskQueueID = NewType("TaskQueueID", str)
"""Task queue handle identifier"""

ObjectID = NewType("ObjectID", str)
"""Short-lived opaque id assigned to an in-session object"""


class Prefix:
    """ID prefix constants."""

    SESSION = "sess"
    TASK_QUEUE = "tq"
    OBJECT = "obj"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator with optional type prefixes."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Singleton instance
_generator = Generator()


def new_session_id() -> SessionID:
    """Generate new session ID."""
    return SessionID(_generator.generate_with_prefix(Prefix.SESSION))


def new_task_queue_id() -> TaskQueueID:
    """Generate new task queue ID."""
    return TaskQueueID(_generator.generate_with_prefix(Prefix.TASK_QUEUE))


def new_object_id() -> ObjectID:
    """Generate new id-table object ID."""
    return ObjectID(_generator.generate_with_prefix(Prefix.OBJECT))


# ============================================================================
# Validation and Parsing
# ============================================================================


def is_valid(id_str: str) -> bool:
    """Check if string is a valid (optionally prefixed) ULID."""
    try:
        ulid_part = id_str.split("_")[1] if "_" in id_str else id_str
        if len(ulid_part) != 26:
            return False
        ULID.from_str(ulid_part)
        return True
    except (ValueError, IndexError):
        return False


def extract_prefix(id_str: str) -> str | None:
    """Extract prefix from prefixed ID, or None if unprefixed."""
    parts = id_str.split("_")
    return parts[0] if len(parts) == 2 else None


__all__ = [
    "SessionID",
    "TaskQueueID",
    "ObjectID",
    "Prefix",
    "new_session_id",
    "new_task_queue_id",
    "new_object_id",
    "is_valid",
    "extract_prefix",
]
