"""Inbound document validation and strict request models."""

from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict

from .errors import DecodeError


# Validation limits
MAX_DOCUMENT_SIZE = 512 * 1024  # 512KB
MAX_TREE_DEPTH = 64


class ValidationError(DecodeError):
    """Validation failed."""

    pass


class RequestValidator(BaseModel):
    """Base validator with strict configuration."""

    model_config = ConfigDict(
        strict=True, validate_assignment=True, extra="forbid", frozen=True  # Immutable by default
    )


def validate_document_size(data: str | bytes, max_size: int, name: str = "document") -> None:
    """
    Validate wire document size before parsing.

    Args:
        data: Raw document text or bytes
        max_size: Maximum allowed size in bytes
        name: Name for error messages

    Raises:
        ValidationError: If size exceeds limit
    """
    size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
    if size > max_size:
        raise ValidationError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_element_depth(
    element: ET.Element, max_depth: int = MAX_TREE_DEPTH, current_depth: int = 0
) -> None:
    """
    Validate element nesting depth to prevent unbounded recursion.

    Args:
        element: Root element to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        ValidationError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise ValidationError(f"Element nesting depth {current_depth} exceeds maximum {max_depth}")

    for child in element:
        validate_element_depth(child, max_depth, current_depth + 1)


def parse_document(
    data: str | bytes,
    max_size: int = MAX_DOCUMENT_SIZE,
    max_depth: int = MAX_TREE_DEPTH,
    name: str = "document",
) -> ET.Element:
    """
    Parse an untrusted wire document with size and depth limits.

    Raises:
        ValidationError: If the document is too large, too deep or not well-formed
    """
    validate_document_size(data, max_size, name)
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ValidationError(f"Malformed {name}: {e}") from e
    validate_element_depth(root, max_depth)
    return root

