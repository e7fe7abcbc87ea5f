"""
Wire document loader.

Decodes ``c`` (component), ``p`` (property) and ``e`` (event) elements into
component nodes or plain property bags.
"""

from typing import Any, Mapping, Protocol, runtime_checkable
from xml.etree.ElementTree import Element

from ..app.component import Component, ComponentFactory
from ..core import get_logger
from ..core.config import ReferencePolicy
from ..core.errors import (
    DecodeError,
    IllegalPropertyError,
    UnknownPropertyTypeError,
    UnresolvedReferenceError,
)
from .registry import PropertyTranslatorRegistry
from .translators import element_text

logger = get_logger(__name__)

COMPONENT_TAG = "c"
PROPERTY_TAG = "p"
EVENT_TAG = "e"


@runtime_checkable
class Client(Protocol):
    """Client-side collaborator notified of observed event kinds."""

    def add_component_listener(self, component: Component, event_type: str) -> None:
        ...


class PropertyTarget(Protocol):
    """Object that named and method-style property elements are applied to."""

    def set(self, name: str, value: Any) -> None:
        ...

    def set_index(self, name: str, index: int, value: Any) -> None:
        ...

    def invoke(self, method: str, *args: Any) -> None:
        ...


class PropertyLoader:
    """
    One decode pass over a wire document.

    Args:
        registry: Translators for explicitly typed properties
        factory: Component kinds, required only for ``load_component``
        client: Optional listener-registration capability; may also
            provide ``decompress_url``
        reference_map: Previously materialized objects keyed by ``r``
        reference_policy: Result for a key absent from ``reference_map``
    """

    def __init__(
        self,
        registry: PropertyTranslatorRegistry,
        factory: ComponentFactory | None = None,
        client: Client | None = None,
        reference_map: Mapping[str, Any] | None = None,
        reference_policy: ReferencePolicy = ReferencePolicy.NULL,
    ) -> None:
        self.registry = registry
        self.factory = factory
        self.client = client
        self.reference_map = reference_map
        self.reference_policy = reference_policy

    def decompress_url(self, url: str) -> str:
        decompress = getattr(self.client, "decompress_url", None)
        return decompress(url) if decompress else url

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    def load_component(self, element: Element) -> Component:
        """
        Decode a ``c`` element and its subtree into a component.

        Raises:
            DecodeError: If the element is not a component or any nested
                element is fatally malformed
        """
        if element.tag != COMPONENT_TAG:
            raise DecodeError(f"Element is not a component: <{element.tag}>")
        if self.factory is None:
            raise RuntimeError("No component factory configured for this loader")

        component = self.factory.new_instance(element.get("t"), element.get("i"))

        if element.get("en") == "false":
            component.set_enabled(False)

        style_name = element.get("s")
        if style_name:
            component.set_style_name(style_name)

        for child in element:
            if child.tag == COMPONENT_TAG:
                component.add(self.load_component(child))
            elif child.tag == PROPERTY_TAG:
                self.load_property(child, target=component)
            elif child.tag == EVENT_TAG:
                self._load_event(child, component)
            else:
                logger.debug("unknown_element_skipped", tag=child.tag, component=component.render_id)

        return component

    def _load_event(self, element: Element, component: Component) -> None:
        event_type = element.get("t")
        if not event_type:
            raise DecodeError("Event element without type")
        component.add_event_type(event_type)
        if self.client is not None:
            self.client.add_component_listener(component, event_type)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def parse_index(self, element: Element) -> int | None:
        index = element.get("x")
        if index is None:
            return None
        try:
            value = int(index)
        except ValueError as e:
            raise DecodeError(f"Invalid property index: {index!r}") from e
        if value < 0:
            raise DecodeError(f"Invalid property index: {index!r}")
        return value

    def decode_value(self, element: Element, use_references: bool = True) -> Any:
        """
        Decode the value of a ``p`` element without applying it.

        Order: explicit type tag, then reference key (when a reference
        table is in use), then plain string.
        """
        type_name = element.get("t")
        if type_name:
            translator = self.registry.resolve(type_name)
            if translator is None:
                raise UnknownPropertyTypeError(type_name)
            return translator.to_property(self, element)

        if use_references and self.reference_map is not None:
            key = element.get("r")
            if key:
                return self._resolve_reference(key)

        return element_text(element)

    def _resolve_reference(self, key: str) -> Any:
        if key in self.reference_map:
            return self.reference_map[key]
        if self.reference_policy is ReferencePolicy.RAISE:
            raise UnresolvedReferenceError(key)
        logger.debug("reference_unresolved", key=key)
        return None

    def load_property(
        self,
        element: Element,
        target: PropertyTarget | None = None,
        style_data: dict[str, Any] | None = None,
        use_references: bool = True,
    ) -> Any:
        """
        Decode a ``p`` element and apply it.

        With ``style_data`` the value is written straight into that bag,
        indexed values as growable lists. Otherwise a named element invokes
        the target's ``set``/``set_index`` and a method-style (``m``)
        element invokes the named method.

        Returns:
            The decoded value
        """
        name = element.get("n")
        method = element.get("m")
        if name and method:
            raise DecodeError(f"Property element has both name {name!r} and method {method!r}")

        value = self.decode_value(element, use_references)
        index = self.parse_index(element)

        if name:
            if style_data is not None:
                if index is None:
                    style_data[name] = value
                else:
                    values = style_data.get(name)
                    if not isinstance(values, list):
                        values = []
                        style_data[name] = values
                    if index >= len(values):
                        values.extend([None] * (index + 1 - len(values)))
                    values[index] = value
            elif target is not None:
                if index is None:
                    target.set(name, value)
                else:
                    target.set_index(name, index, value)
            else:
                raise DecodeError(f"No target for property {name!r}")
            return value

        if not method:
            raise DecodeError("Property element has neither name nor method")
        if target is None:
            raise IllegalPropertyError(f"Method-style property {method!r} requires a target object")
        if index is None:
            target.invoke(method, value)
        else:
            target.invoke(method, index, value)
        return value


__all__ = [
    "COMPONENT_TAG",
    "PROPERTY_TAG",
    "EVENT_TAG",
    "Client",
    "PropertyTarget",
    "PropertyLoader",
]
