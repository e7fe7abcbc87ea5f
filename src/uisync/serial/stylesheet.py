"""Style sheet codec: ``ss`` elements holding named, typed ``s`` style elements."""

from xml.etree.ElementTree import Element, SubElement

from ..app.stylesheet import StyleSheet
from ..core import get_logger
from ..core.errors import DecodeError
from .loader import PROPERTY_TAG, PropertyLoader
from .writer import PropertyWriter

logger = get_logger(__name__)

STYLE_SHEET_TAG = "ss"
STYLE_TAG = "s"


def load_style_sheet(loader: PropertyLoader, element: Element) -> StyleSheet:
    """
    Decode a style sheet element.

    Each ``s`` child contributes the bag built from its ``p`` children,
    keyed by its ``n``/``t`` attributes. A later style with the same key
    replaces an earlier one.
    """
    if element.tag != STYLE_SHEET_TAG:
        raise DecodeError(f"Expected <{STYLE_SHEET_TAG}> root, got <{element.tag}>")
    style_sheet = StyleSheet()

    for style_element in element:
        if style_element.tag != STYLE_TAG:
            continue
        name = style_element.get("n")
        if not name:
            raise DecodeError("Style element without a name")
        style: dict = {}
        for child in style_element:
            if child.tag == PROPERTY_TAG:
                loader.load_property(child, style_data=style)
        style_sheet.set_style(name, style_element.get("t"), style)

    logger.debug("style_sheet_loaded", styles=len(style_sheet))
    return style_sheet


def store_style_sheet(writer: PropertyWriter, style_sheet: StyleSheet) -> Element:
    """Encode a style sheet; properties without an encoding are omitted."""
    element = Element(STYLE_SHEET_TAG)
    for (name, type_name), style in style_sheet:
        style_element = SubElement(element, STYLE_TAG, n=name)
        if type_name:
            style_element.set("t", type_name)
        for property_name, value in style.items():
            for child in writer.property_elements(property_name, value):
                style_element.append(child)
    return element


__all__ = ["STYLE_SHEET_TAG", "STYLE_TAG", "load_style_sheet", "store_style_sheet"]
