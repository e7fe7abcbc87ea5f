"""
Wire document writer.

Encodes property values and component subtrees into ``p``/``c``/``e``
elements. Values that cannot be encoded are omitted, never an error.
"""

import re
from typing import Any
from xml.etree.ElementTree import Element, SubElement, tostring

from ..app.component import Component
from ..core import get_logger
from ..monitoring import metrics_collector
from .loader import COMPONENT_TAG, EVENT_TAG, PROPERTY_TAG
from .registry import PropertyTranslatorRegistry

logger = get_logger(__name__)

# Type tags written for non-string scalars so a decode recovers the type
_SCALAR_TAGS: dict[type, str] = {bool: "b", int: "i", float: "f"}

# Characters XML 1.0 cannot carry, not even as character references
_ILLEGAL_XML_CHARS = re.compile(r"[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _has_illegal_chars(element: Element) -> bool:
    for node in element.iter():
        if node.text and _ILLEGAL_XML_CHARS.search(node.text):
            return True
        if any(_ILLEGAL_XML_CHARS.search(value) for value in node.attrib.values()):
            return True
    return False


def to_string(element: Element) -> str:
    """
    Serialize an element to document text.

    Carriage returns in text content are written as character references
    so that parsing does not normalize them to line feeds. Attribute
    values are already escaped this way.
    """
    return tostring(element, encoding="unicode").replace("\r", "&#13;")


class PropertyWriter:
    """
    Encoder for one outbound document.

    Args:
        registry: Translators for composite values
        client: Optional object providing ``compress_url``
    """

    def __init__(self, registry: PropertyTranslatorRegistry, client: Any = None) -> None:
        self.registry = registry
        self.client = client

    def compress_url(self, url: str) -> str:
        compress = getattr(self.client, "compress_url", None)
        return compress(url) if compress else url

    def store_property(self, element: Element, value: Any) -> bool:
        """
        Write a value into a property element.

        Returns:
            False when the value was omitted: null, no writable translator,
            or characters XML cannot carry
        """
        if value is None:
            # Null values are not sent; the client keeps its previous value
            metrics_collector.record_skipped_property("null")
            return False

        if not self._write_value(element, value):
            return False

        if _has_illegal_chars(element):
            logger.debug("property_not_encodable", reason="illegal_characters", name=element.get("n"))
            metrics_collector.record_skipped_property("unencodable")
            return False
        return True

    def _write_value(self, element: Element, value: Any) -> bool:
        if isinstance(value, str):
            element.text = value
            return True

        scalar_tag = _SCALAR_TAGS.get(type(value))
        if scalar_tag is not None:
            element.set("t", scalar_tag)
            element.text = ("true" if value else "false") if isinstance(value, bool) else repr(value)
            return True

        translator = self.registry.resolve_for_value(value)
        if translator is None or not translator.writable:
            logger.debug("property_not_encodable", value_type=type(value).__name__)
            metrics_collector.record_skipped_property("no_translator")
            return False

        element.set("t", translator.type_name)
        translator.to_xml(self, element, value)
        return True

    def property_elements(self, name: str, value: Any) -> list[Element]:
        """
        Build the ``p`` elements for one named property.

        A list becomes one indexed element per non-null slot.
        """
        if isinstance(value, list):
            elements = []
            for index, item in enumerate(value):
                element = Element(PROPERTY_TAG, n=name, x=str(index))
                if self.store_property(element, item):
                    elements.append(element)
            return elements

        element = Element(PROPERTY_TAG, n=name)
        if self.store_property(element, value):
            return [element]
        return []

    def store_component(self, component: Component) -> Element:
        """Encode a component and its subtree into a ``c`` element."""
        element = Element(COMPONENT_TAG, t=component.type_name)
        if component.render_id is not None:
            element.set("i", component.render_id)
        if not component.enabled:
            element.set("en", "false")
        if component.style_name:
            element.set("s", component.style_name)

        for name, value in component.properties.items():
            for child in self.property_elements(name, value):
                element.append(child)

        for event_type in component.event_types:
            SubElement(element, EVENT_TAG, t=event_type)

        for child in component.children:
            element.append(self.store_component(child))

        return element


__all__ = ["PropertyWriter", "to_string"]
