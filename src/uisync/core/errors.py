"""
Error taxonomy for the synchronization core.

Fatal conditions raise a ``DecodeError`` (or a lifecycle error) and abort the
current operation. Soft-skip conditions never reach the caller. A stale
transaction is not an error at all; see ``uisync.session.gate``.
"""


class SyncError(Exception):
    """Base class for all synchronization errors."""


class DecodeError(SyncError):
    """Malformed or contradictory wire data with no safe default."""


class UnknownPropertyTypeError(DecodeError):
    """Property element names a type tag with no registered translator."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Translator not available for property type: {type_name}")
        self.type_name = type_name


class UnknownComponentTypeError(DecodeError):
    """Component element names a kind the factory cannot instantiate."""

    def __init__(self, type_name: str | None) -> None:
        super().__init__(f"Unknown component type: {type_name}")
        self.type_name = type_name


class InvalidBorderError(DecodeError):
    """Multi-sided border without a top side."""


class InvalidFillImageBorderError(DecodeError):
    """Fill image border with an image count other than 0 or 8."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Invalid FillImageBorder image count: {count}")
        self.count = count


class UnresolvedReferenceError(DecodeError):
    """Reference key absent from the reference table (``raise`` policy only)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Unresolved property reference: {key}")
        self.key = key


class InvalidRenderIdError(DecodeError):
    """Client render id is malformed or names no live component."""

    def __init__(self, client_render_id: str) -> None:
        super().__init__(f"Invalid component element id: {client_render_id}")
        self.client_render_id = client_render_id


class IllegalPropertyError(DecodeError):
    """Property or method the target does not expose to the wire."""


class SessionStateError(SyncError):
    """Session lifecycle misuse, e.g. a second init."""


class RegistryError(SyncError):
    """Registration attempted on a sealed registry."""


__all__ = [
    "SyncError",
    "DecodeError",
    "UnknownPropertyTypeError",
    "UnknownComponentTypeError",
    "InvalidBorderError",
    "InvalidFillImageBorderError",
    "UnresolvedReferenceError",
    "InvalidRenderIdError",
    "IllegalPropertyError",
    "SessionStateError",
    "RegistryError",
]
