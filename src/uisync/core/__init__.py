"""Core utilities and infrastructure."""

from .config import Settings, ReferencePolicy, get_settings
from .logging_config import configure_logging, configure_from_settings, get_logger, LogContext
from .errors import (
    SyncError,
    DecodeError,
    UnknownPropertyTypeError,
    UnknownComponentTypeError,
    InvalidBorderError,
    InvalidFillImageBorderError,
    UnresolvedReferenceError,
    InvalidRenderIdError,
    IllegalPropertyError,
    SessionStateError,
    RegistryError,
)
from .validate import (
    ValidationError,
    RequestValidator,
    validate_document_size,
    validate_element_depth,
    parse_document,
)
from .tracing import init_tracer, trace_operation


def create_container(settings: Settings | None = None):
    """Create dependency injection container (lazy import to avoid circular deps)."""
    from .container import create_container as _create_container

    return _create_container(settings)


__all__ = [
    # Config
    "Settings",
    "ReferencePolicy",
    "get_settings",
    # Logging
    "configure_logging",
    "configure_from_settings",
    "get_logger",
    "LogContext",
    # Errors
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
    # Validation
    "ValidationError",
    "RequestValidator",
    "validate_document_size",
    "validate_element_depth",
    "parse_document",
    # Tracing
    "init_tracer",
    "trace_operation",
    # DI
    "create_container",
]
