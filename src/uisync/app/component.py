"""
Component tree nodes and the component factory.
"""

import threading
from typing import Any, Callable, ClassVar, Iterator, TypeVar

from ..core import get_logger
from ..core.errors import UnknownComponentTypeError, IllegalPropertyError

logger = get_logger(__name__)

C = TypeVar("C", bound=type["Component"])


class Component:
    """
    A uniquely identified node in the synchronized tree.

    The parent exclusively owns its children. Properties live in a local
    bag keyed by name; indexed properties are lists that grow on demand.
    Only event kinds are tracked, never listener bodies.

    Subclasses declare which method names a wire document may invoke
    (``property_methods``) and which properties a client may write
    (``input_properties``).
    """

    type_name: ClassVar[str] = "Component"
    property_methods: ClassVar[frozenset[str]] = frozenset()
    input_properties: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, render_id: str | None = None) -> None:
        self.render_id = render_id
        self.parent: Component | None = None
        self.children: list[Component] = []
        self.enabled = True
        self.style_name: str | None = None
        self._properties: dict[str, Any] = {}
        self._event_types: dict[str, None] = {}

    def __repr__(self) -> str:
        return f"<{self.type_name} {self.render_id}>"

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        return self._properties.get(name)

    def set(self, name: str, value: Any) -> None:
        self._properties[name] = value

    def get_index(self, name: str, index: int) -> Any:
        values = self._properties.get(name)
        if not isinstance(values, list) or index >= len(values):
            return None
        return values[index]

    def set_index(self, name: str, index: int, value: Any) -> None:
        """Set one slot of an indexed property, padding with None as needed."""
        if index < 0:
            raise IndexError(f"Negative property index: {index}")
        values = self._properties.get(name)
        if not isinstance(values, list):
            values = []
            self._properties[name] = values
        if index >= len(values):
            values.extend([None] * (index + 1 - len(values)))
        values[index] = value

    @property
    def properties(self) -> dict[str, Any]:
        """Read-only view of the local property bag."""
        return dict(self._properties)

    def invoke(self, method: str, *args: Any) -> None:
        """Invoke an allow-listed method on behalf of a wire document."""
        if method not in self.property_methods:
            raise IllegalPropertyError(
                f"Method {method!r} is not invocable on {self.type_name}"
            )
        getattr(self, method)(*args)

    def accepts_client_property(self, name: str) -> bool:
        return name in self.input_properties

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled

    def set_style_name(self, style_name: str | None) -> None:
        self.style_name = style_name

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_event_type(self, event_type: str) -> None:
        self._event_types[event_type] = None

    def remove_event_type(self, event_type: str) -> None:
        self._event_types.pop(event_type, None)

    def has_event_type(self, event_type: str) -> bool:
        return event_type in self._event_types

    @property
    def event_types(self) -> list[str]:
        """Observed event kinds in registration order."""
        return list(self._event_types)

    # ------------------------------------------------------------------
    # Hierarchy
    # ------------------------------------------------------------------

    def add(self, child: "Component", index: int | None = None) -> None:
        """Add a child, moving it from any previous parent."""
        if child is self or child.is_ancestor_of(self):
            raise ValueError("Cannot add a component to itself or its descendant")
        if child.parent is not None:
            child.parent.remove(child)
        if index is None:
            self.children.append(child)
        else:
            self.children.insert(index, child)
        child.parent = self

    def remove(self, child: "Component") -> None:
        self.children.remove(child)
        child.parent = None

    def remove_all(self) -> None:
        for child in list(self.children):
            self.remove(child)

    def is_ancestor_of(self, component: "Component") -> bool:
        node = component.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def walk(self) -> Iterator["Component"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, render_id: str) -> "Component | None":
        for node in self.walk():
            if node.render_id == render_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        """Structural description, used to compare trees."""
        return {
            "type": self.type_name,
            "id": self.render_id,
            "enabled": self.enabled,
            "style": self.style_name,
            "properties": dict(self._properties),
            "events": self.event_types,
            "children": [child.to_dict() for child in self.children],
        }


class ComponentFactory:
    """
    Registry of component kinds keyed by type tag.

    Registration happens at startup; lookups during serving are lock-free
    because each registration swaps in a fresh mapping.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._kinds: dict[str, type[Component]] = {Component.type_name: Component}

    def register(self, component_class: type[Component], type_name: str | None = None) -> None:
        name = type_name or component_class.type_name
        with self._lock:
            kinds = dict(self._kinds)
            kinds[name] = component_class
            self._kinds = kinds
        logger.debug("component_kind_registered", type=name)

    def kind(self, type_name: str | None = None) -> Callable[[C], C]:
        """Class decorator form of ``register``."""

        def decorator(component_class: C) -> C:
            self.register(component_class, type_name)
            return component_class

        return decorator

    def get(self, type_name: str) -> type[Component] | None:
        return self._kinds.get(type_name)

    def new_instance(self, type_name: str | None, render_id: str | None = None) -> Component:
        """
        Instantiate a component kind.

        Raises:
            UnknownComponentTypeError: If no kind is registered for the tag
        """
        component_class = self._kinds.get(type_name) if type_name else None
        if component_class is None:
            raise UnknownComponentTypeError(type_name)
        return component_class(render_id)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


__all__ = ["Component", "ComponentFactory"]
