"""
Built-in property translators.

Scalars (null, boolean, integer, float, string) plus the composite value
types shared by every component kind. Feature modules add their own
translators to the same registry at startup.
"""

import re
from datetime import date
from typing import TYPE_CHECKING, Any
from xml.etree.ElementTree import Element, SubElement

from ..app.values import (
    Alignment,
    Border,
    FillImage,
    FillImageBorder,
    Font,
    ImageReference,
    Insets,
)
from ..core.errors import DecodeError, InvalidBorderError, InvalidFillImageBorderError
from .registry import PropertyTranslator, PropertyTranslatorRegistry

if TYPE_CHECKING:
    from .loader import PropertyLoader
    from .writer import PropertyWriter


def element_text(element: Element) -> str:
    """Text content of a property element, empty when absent."""
    return element.text or ""


def child_element(element: Element, tag: str) -> Element:
    """First direct child with the given tag; missing is a decode error."""
    child = element.find(tag)
    if child is None:
        raise DecodeError(f"Property element missing <{tag}> child")
    return child


# ============================================================================
# Scalars
# ============================================================================


class NullTranslator(PropertyTranslator):
    type_name = "0"

    def to_property(self, loader: "PropertyLoader", element: Element) -> Any:
        return None


class BooleanTranslator(PropertyTranslator):
    type_name = "b"

    def to_property(self, loader: "PropertyLoader", element: Element) -> bool:
        return element_text(element) == "true"


class IntegerTranslator(PropertyTranslator):
    type_name = "i"

    def to_property(self, loader: "PropertyLoader", element: Element) -> int:
        text = element_text(element)
        try:
            return int(text.strip())
        except ValueError as e:
            raise DecodeError(f"Invalid integer property: {text!r}") from e


class FloatTranslator(PropertyTranslator):
    type_name = "f"

    def to_property(self, loader: "PropertyLoader", element: Element) -> float:
        text = element_text(element)
        try:
            return float(text.strip())
        except ValueError as e:
            raise DecodeError(f"Invalid float property: {text!r}") from e


class StringTranslator(PropertyTranslator):
    type_name = "s"

    def to_property(self, loader: "PropertyLoader", element: Element) -> str:
        return element_text(element)


# ============================================================================
# Structured values
# ============================================================================


class DateTranslator(PropertyTranslator):
    """``YYYY.MM.DD``; text that does not match decodes to None."""

    type_name = "d"
    writable = True

    _EXPR = re.compile(r"(\d{4})\.(\d{2}).(\d{2})")

    def to_property(self, loader: "PropertyLoader", element: Element) -> date | None:
        match = self._EXPR.search(element_text(element))
        if not match:
            return None
        try:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        except ValueError:
            return None

    def to_xml(self, writer: "PropertyWriter", element: Element, value: date) -> None:
        element.text = f"{value.year:04d}.{value.month:02d}.{value.day:02d}"


class MapTranslator(PropertyTranslator):
    """Nested named property elements decoded into a fresh dict."""

    type_name = "m"
    writable = True

    def to_property(self, loader: "PropertyLoader", element: Element) -> dict[str, Any]:
        mapping: dict[str, Any] = {}
        for child in element:
            if child.tag == "p":
                loader.load_property(child, style_data=mapping, use_references=False)
        return mapping

    def to_xml(self, writer: "PropertyWriter", element: Element, value: dict[str, Any]) -> None:
        for key, entry in value.items():
            for child in writer.property_elements(str(key), entry):
                element.append(child)


class LayoutDataTranslator(MapTranslator):
    """Layout data: a property bag attached to a child component."""

    type_name = "L"
    writable = False


class AlignmentTranslator(PropertyTranslator):
    """
    ``<a h="..." v="..."/>``. One axis decodes to its bare value, both axes
    to an ``Alignment``. Vertical "center" on the wire is "middle" in memory.
    """

    type_name = "AL"
    writable = True

    _HORIZONTAL_MAP = {
        "leading": "leading",
        "trailing": "trailing",
        "left": "left",
        "center": "center",
        "right": "right",
    }
    _VERTICAL_MAP = {"top": "top", "center": "middle", "bottom": "bottom"}
    _VERTICAL_WIRE = {"top": "top", "middle": "center", "bottom": "bottom"}

    def to_property(self, loader: "PropertyLoader", element: Element) -> Alignment | str | None:
        a = child_element(element, "a")
        h = self._HORIZONTAL_MAP.get(a.get("h", ""))
        v = self._VERTICAL_MAP.get(a.get("v", ""))

        if h:
            if v:
                return Alignment(horizontal=h, vertical=v)
            return h
        return v

    def to_xml(self, writer: "PropertyWriter", element: Element, value: Alignment) -> None:
        a = SubElement(element, "a")
        if value.horizontal:
            a.set("h", value.horizontal)
        if value.vertical:
            a.set("v", self._VERTICAL_WIRE[value.vertical])


class BorderTranslator(PropertyTranslator):
    """
    Shorthand ``v`` attribute, or ``<b t r b l/>`` with sides contiguous
    from top. A side after the first missing one is ignored.
    """

    type_name = "BO"
    writable = True

    def to_property(self, loader: "PropertyLoader", element: Element) -> Border | str:
        shorthand = element.get("v")
        if shorthand:
            return shorthand

        b = element.find("b")
        top = b.get("t") if b is not None else None
        if not top:
            raise InvalidBorderError("Invalid multi-sided border: no sides set.")

        sides: dict[str, str] = {"top": top}
        for attr, side in (("r", "right"), ("b", "bottom"), ("l", "left")):
            value = b.get(attr)
            if not value:
                break
            sides[side] = value
        return Border(**sides)

    def to_xml(self, writer: "PropertyWriter", element: Element, value: Border) -> None:
        b = SubElement(element, "b")
        b.set("t", value.top)
        for attr, side in (("r", value.right), ("b", value.bottom), ("l", value.left)):
            if side is None:
                break
            b.set(attr, side)


class ExtentTranslator(PropertyTranslator):
    type_name = "X"

    def to_property(self, loader: "PropertyLoader", element: Element) -> str:
        return element_text(element)


class FillImageTranslator(PropertyTranslator):
    """``<fi u r x y/>``; a bare URL when repeat and position are absent."""

    type_name = "FI"
    writable = True

    def to_property(self, loader: "PropertyLoader", element: Element) -> FillImage | str:
        return self.parse_element(loader, child_element(element, "fi"))

    def parse_element(self, loader: "PropertyLoader", fi: Element) -> FillImage | str:
        url = fi.get("u")
        if url is None:
            raise DecodeError("Fill image without url")
        url = loader.decompress_url(url)
        repeat = fi.get("r")
        x = fi.get("x")
        y = fi.get("y")

        if repeat or x or y:
            return FillImage(url=url, repeat=repeat, x=x, y=y)
        return url

    def to_xml(self, writer: "PropertyWriter", element: Element, value: FillImage) -> None:
        self.store_element(writer, element, value)

    def store_element(self, writer: "PropertyWriter", parent: Element, value: FillImage | str) -> None:
        fi = SubElement(parent, "fi")
        if isinstance(value, str):
            fi.set("u", writer.compress_url(value))
            return
        fi.set("u", writer.compress_url(value.url))
        for attr, field in (("r", value.repeat), ("x", value.x), ("y", value.y)):
            if field is not None:
                fi.set(attr, field)


class FillImageBorderTranslator(PropertyTranslator):
    """``<fib ci bi bc>`` with exactly zero or eight ``fi``/``null-fi`` children."""

    type_name = "FIB"
    writable = True

    def __init__(self, fill_image: FillImageTranslator) -> None:
        self._fill_image = fill_image

    def to_property(self, loader: "PropertyLoader", element: Element) -> FillImageBorder:
        fib = child_element(element, "fib")
        fields: dict[str, Any] = {
            "content_insets": fib.get("ci") or None,
            "border_insets": fib.get("bi") or None,
            "color": fib.get("bc"),
        }

        images: list[FillImage | str | None] = []
        for child in fib:
            if child.tag == "fi":
                images.append(self._fill_image.parse_element(loader, child))
            elif child.tag == "null-fi":
                images.append(None)

        if len(images) not in (0, 8):
            raise InvalidFillImageBorderError(len(images))
        if images:
            fields.update(zip(FillImageBorder.SEGMENTS, images))
        return FillImageBorder(**fields)

    def to_xml(self, writer: "PropertyWriter", element: Element, value: FillImageBorder) -> None:
        fib = SubElement(element, "fib")
        if value.content_insets is not None:
            fib.set("ci", value.content_insets)
        if value.border_insets is not None:
            fib.set("bi", value.border_insets)
        if value.color is not None:
            fib.set("bc", value.color)

        images = value.images()
        if all(image is None for image in images):
            return
        for image in images:
            if image is None:
                SubElement(fib, "null-fi")
            else:
                self._fill_image.store_element(writer, fib, image)


class FontTranslator(PropertyTranslator):
    """``<f sz bo it un ov lt><tf n/>...</f>``; several typefaces form a fallback chain."""

    type_name = "F"
    writable = True

    _FLAGS = (
        ("bo", "bold"),
        ("it", "italic"),
        ("un", "underline"),
        ("ov", "overline"),
        ("lt", "line_through"),
    )

    def to_property(self, loader: "PropertyLoader", element: Element) -> Font:
        f = child_element(element, "f")
        typefaces = [tf.get("n", "") for tf in f.findall("tf")]

        fields: dict[str, Any] = {}
        if len(typefaces) > 1:
            fields["typeface"] = tuple(typefaces)
        elif len(typefaces) == 1:
            fields["typeface"] = typefaces[0]

        size = f.get("sz")
        if size:
            fields["size"] = size

        for attr, flag in self._FLAGS:
            if f.get(attr):
                fields[flag] = True
        return Font(**fields)

    def to_xml(self, writer: "PropertyWriter", element: Element, value: Font) -> None:
        f = SubElement(element, "f")
        if value.size is not None:
            f.set("sz", value.size)
        for attr, flag in self._FLAGS:
            if getattr(value, flag):
                f.set(attr, "1")

        typefaces = (value.typeface,) if isinstance(value.typeface, str) else value.typeface or ()
        for typeface in typefaces:
            SubElement(f, "tf", n=typeface)


class ImageReferenceTranslator(PropertyTranslator):
    """URL text with optional ``w``/``h``; a bare URL when both are absent."""

    type_name = "I"
    writable = True

    def to_property(self, loader: "PropertyLoader", element: Element) -> ImageReference | str:
        url = loader.decompress_url(element_text(element))
        width = element.get("w") or None
        height = element.get("h") or None

        if width or height:
            return ImageReference(url=url, width=width, height=height)
        return url

    def to_xml(self, writer: "PropertyWriter", element: Element, value: ImageReference) -> None:
        element.text = writer.compress_url(value.url)
        if value.width is not None:
            element.set("w", value.width)
        if value.height is not None:
            element.set("h", value.height)


class InsetsTranslator(PropertyTranslator):
    """One to four extents in CSS shorthand order."""

    type_name = "N"
    writable = True

    def to_property(self, loader: "PropertyLoader", element: Element) -> Insets:
        try:
            return Insets.parse(element_text(element))
        except ValueError as e:
            raise DecodeError(str(e)) from e

    def to_xml(self, writer: "PropertyWriter", element: Element, value: Insets) -> None:
        element.text = value.to_text()


def install_builtin_translators(registry: PropertyTranslatorRegistry) -> None:
    """Register the scalar and composite translators under their long and short tags."""
    registry.register("0", NullTranslator())
    registry.register("b", BooleanTranslator())
    registry.register("i", IntegerTranslator())
    registry.register("f", FloatTranslator())
    registry.register("s", StringTranslator())

    date_translator = DateTranslator()
    registry.register("d", date_translator)
    registry.register_by_type(date, date_translator)

    map_translator = MapTranslator()
    registry.register("m", map_translator)
    registry.register_by_type(dict, map_translator)

    fill_image = FillImageTranslator()
    composites: list[tuple[str, PropertyTranslator]] = [
        ("Alignment", AlignmentTranslator()),
        ("Border", BorderTranslator()),
        ("Extent", ExtentTranslator()),
        ("FillImage", fill_image),
        ("FillImageBorder", FillImageBorderTranslator(fill_image)),
        ("Font", FontTranslator()),
        ("ImageReference", ImageReferenceTranslator()),
        ("Insets", InsetsTranslator()),
        ("LayoutData", LayoutDataTranslator()),
    ]
    for long_name, translator in composites:
        registry.register(long_name, translator)
        registry.register(translator.type_name, translator)


__all__ = [
    "element_text",
    "NullTranslator",
    "BooleanTranslator",
    "IntegerTranslator",
    "FloatTranslator",
    "StringTranslator",
    "DateTranslator",
    "MapTranslator",
    "LayoutDataTranslator",
    "AlignmentTranslator",
    "BorderTranslator",
    "ExtentTranslator",
    "FillImageTranslator",
    "FillImageBorderTranslator",
    "FontTranslator",
    "ImageReferenceTranslator",
    "InsetsTranslator",
    "install_builtin_translators",
]
