"""
Composite property values.

Each value type carries a ``class_name`` that selects its translator on
encode before any runtime-type lookup is attempted.

Values are normalized on construction to the form the wire decodes them
to: a value that would travel as a bare string (a single-axis alignment, a
fill image with only a URL) is a string, not a model, and empty optional
fields are None.
"""

from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


HorizontalAlignment = Literal["leading", "trailing", "left", "center", "right"]
VerticalAlignment = Literal["top", "middle", "bottom"]

# One CSS extent, e.g. "4px" or "1em"
Extent = str


def _empty_to_none(value: Any) -> Any:
    return None if value == "" else value


class PropertyValue(BaseModel):
    """Base for immutable composite values."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    class_name: ClassVar[str] = ""


class Alignment(PropertyValue):
    """Two-axis alignment. A single-axis alignment is a bare string value."""

    class_name: ClassVar[str] = "Alignment"

    horizontal: HorizontalAlignment
    vertical: VerticalAlignment


class Border(PropertyValue):
    """Four-sided border; sides must be contiguous starting from top."""

    class_name: ClassVar[str] = "Border"

    top: str = Field(min_length=1)
    right: str | None = None
    bottom: str | None = None
    left: str | None = None

    @field_validator("right", "bottom", "left", mode="before")
    @classmethod
    def _normalize_sides(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @model_validator(mode="after")
    def _check_contiguous(self) -> "Border":
        sides = [self.right, self.bottom, self.left]
        seen_missing = False
        for side in sides:
            if side is None:
                seen_missing = True
            elif seen_missing:
                raise ValueError("border sides must be contiguous from top")
        return self


class Font(PropertyValue):
    """
    Font with a typeface fallback chain and style flags.

    A chain of one typeface is stored as that name; an empty chain as None.
    """

    class_name: ClassVar[str] = "Font"

    typeface: str | tuple[str, ...] | None = None
    size: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    overline: bool = False
    line_through: bool = False

    @field_validator("size", mode="before")
    @classmethod
    def _normalize_size(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @field_validator("typeface", mode="after")
    @classmethod
    def _collapse_chain(cls, value: str | tuple[str, ...] | None) -> str | tuple[str, ...] | None:
        if isinstance(value, tuple):
            if not value:
                return None
            if len(value) == 1:
                return value[0]
        return value


class FillImage(PropertyValue):
    """
    Background image with repeat mode and position.

    An image with neither repeat nor position is its bare URL string.
    """

    class_name: ClassVar[str] = "FillImage"

    url: str
    repeat: str | None = None
    x: str | None = None
    y: str | None = None

    @field_validator("repeat", "x", "y", mode="before")
    @classmethod
    def _normalize_fields(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @model_validator(mode="after")
    def _check_not_bare(self) -> "FillImage":
        if self.repeat is None and self.x is None and self.y is None:
            raise ValueError("fill image without repeat or position is a bare URL")
        return self


class FillImageBorder(PropertyValue):
    """Border drawn from eight images, one per segment."""

    class_name: ClassVar[str] = "FillImageBorder"

    SEGMENTS: ClassVar[tuple[str, ...]] = (
        "top_left",
        "top",
        "top_right",
        "left",
        "right",
        "bottom_left",
        "bottom",
        "bottom_right",
    )

    content_insets: str | None = None
    border_insets: str | None = None
    color: str | None = None
    top_left: FillImage | str | None = None
    top: FillImage | str | None = None
    top_right: FillImage | str | None = None
    left: FillImage | str | None = None
    right: FillImage | str | None = None
    bottom_left: FillImage | str | None = None
    bottom: FillImage | str | None = None
    bottom_right: FillImage | str | None = None

    @field_validator("content_insets", "border_insets", mode="before")
    @classmethod
    def _normalize_insets(cls, value: Any) -> Any:
        return _empty_to_none(value)

    def images(self) -> list[FillImage | str | None]:
        """Segment images in wire order."""
        return [getattr(self, name) for name in self.SEGMENTS]


class ImageReference(PropertyValue):
    """
    Image URL with explicit dimensions.

    An image without dimensions is its bare URL string.
    """

    class_name: ClassVar[str] = "ImageReference"

    url: str
    width: str | None = None
    height: str | None = None

    @field_validator("width", "height", mode="before")
    @classmethod
    def _normalize_dimensions(cls, value: Any) -> Any:
        return _empty_to_none(value)

    @model_validator(mode="after")
    def _check_not_bare(self) -> "ImageReference":
        if self.width is None and self.height is None:
            raise ValueError("image reference without dimensions is a bare URL")
        return self


class Insets(PropertyValue):
    """Four extents, written in CSS shorthand order."""

    class_name: ClassVar[str] = "Insets"

    top: Extent = Field(pattern=r"^\S+$")
    right: Extent = Field(pattern=r"^\S+$")
    bottom: Extent = Field(pattern=r"^\S+$")
    left: Extent = Field(pattern=r"^\S+$")

    @classmethod
    def parse(cls, text: str) -> "Insets":
        """Parse one to four whitespace-separated extents."""
        parts = text.split()
        if len(parts) == 1:
            return cls(top=parts[0], right=parts[0], bottom=parts[0], left=parts[0])
        if len(parts) == 2:
            return cls(top=parts[0], right=parts[1], bottom=parts[0], left=parts[1])
        if len(parts) == 3:
            return cls(top=parts[0], right=parts[1], bottom=parts[2], left=parts[1])
        if len(parts) == 4:
            return cls(top=parts[0], right=parts[1], bottom=parts[2], left=parts[3])
        raise ValueError(f"Invalid insets: {text!r}")

    def to_text(self) -> str:
        return f"{self.top} {self.right} {self.bottom} {self.left}"


__all__ = [
    "PropertyValue",
    "Alignment",
    "Border",
    "Font",
    "FillImage",
    "FillImageBorder",
    "ImageReference",
    "Insets",
]
