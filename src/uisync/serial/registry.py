"""
Property Translator Registry
Process-wide mapping from type tags and runtime types to property translators.
"""

import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import TYPE_CHECKING, Any, ClassVar
from xml.etree.ElementTree import Element

from ..core import get_logger
from ..core.errors import RegistryError

if TYPE_CHECKING:
    from .loader import PropertyLoader
    from .writer import PropertyWriter

logger = get_logger(__name__)


class PropertyTranslator(ABC):
    """
    Bidirectional translator between a property value and a ``p`` element.

    ``type_name`` is the tag written to the ``t`` attribute on encode.
    Translators that cannot encode leave ``writable`` False; the writer
    then omits values of their type.
    """

    type_name: ClassVar[str] = ""
    writable: ClassVar[bool] = False

    @abstractmethod
    def to_property(self, loader: "PropertyLoader", element: Element) -> Any:
        """Decode the value carried by a property element."""
        pass

    def to_xml(self, writer: "PropertyWriter", element: Element, value: Any) -> None:
        """Encode a value into a property element."""
        raise NotImplementedError(f"{type(self).__name__} does not support encoding")


class PropertyTranslatorRegistry:
    """
    Translator lookup by explicit tag and by runtime type.

    Registration is expected at startup. Each registration swaps in a fresh
    table under a lock so concurrent readers never see a partial update;
    ``seal()`` ends the registration phase.

    Examples:
        >>> registry = PropertyTranslatorRegistry()
        >>> extent = ExtentTranslator()
        >>> registry.register("X", extent)
        >>> registry.resolve("X") is extent
        True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_name: dict[str, PropertyTranslator] = {}
        self._by_type: tuple[tuple[type, PropertyTranslator], ...] = ()
        self._sealed = False

    def _check_open(self) -> None:
        if self._sealed:
            raise RegistryError("Property translator registry is sealed")

    def register(self, type_name: str, translator: PropertyTranslator) -> None:
        """
        Register a translator for an explicit type tag.

        Args:
            type_name: Tag carried in the ``t`` attribute or a value's ``class_name``
            translator: Translator instance (last registration wins)
        """
        with self._lock:
            self._check_open()
            by_name = dict(self._by_name)
            by_name[type_name] = translator
            self._by_name = by_name
        logger.debug("translator_registered", type=type_name)

    def register_by_type(self, value_type: type, translator: PropertyTranslator) -> None:
        """
        Register a translator for values of an exact runtime type.

        Args:
            value_type: Runtime type (matched exactly, subclasses do not match)
            translator: Translator instance (last registration wins)
        """
        with self._lock:
            self._check_open()
            entries = [(t, tr) for t, tr in self._by_type if t is not value_type]
            entries.append((value_type, translator))
            self._by_type = tuple(entries)
        logger.debug("translator_registered", runtime_type=value_type.__name__)

    def resolve(self, type_name: str) -> PropertyTranslator | None:
        """Get translator by type tag."""
        return self._by_name.get(type_name)

    def resolve_by_type(self, value_type: type) -> PropertyTranslator | None:
        """Get translator by exact runtime type (linear scan)."""
        for registered, translator in self._by_type:
            if registered is value_type:
                return translator
        return None

    def resolve_for_value(self, value: Any) -> PropertyTranslator | None:
        """Resolve by the value's declared class tag first, then by runtime type."""
        class_name = getattr(type(value), "class_name", None)
        if isinstance(class_name, str) and class_name:
            translator = self._by_name.get(class_name)
            if translator is not None:
                return translator
        return self.resolve_by_type(type(value))

    def seal(self) -> None:
        """End the registration phase."""
        with self._lock:
            self._sealed = True
        logger.info("translator_registry_sealed", translators=len(self._by_name))

    @property
    def sealed(self) -> bool:
        return self._sealed

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._by_name

    def __len__(self) -> int:
        return len(self._by_name)


def create_registry(builtins: bool = True) -> PropertyTranslatorRegistry:
    """Create a registry, optionally pre-loaded with the built-in translators."""
    registry = PropertyTranslatorRegistry()
    if builtins:
        from .translators import install_builtin_translators

        install_builtin_translators(registry)
    return registry


@lru_cache
def get_registry() -> PropertyTranslatorRegistry:
    """Get the process-wide registry with built-in translators installed."""
    return create_registry()


__all__ = [
    "PropertyTranslator",
    "PropertyTranslatorRegistry",
    "create_registry",
    "get_registry",
]
