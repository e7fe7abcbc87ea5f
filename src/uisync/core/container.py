"""Dependency Injection Container."""

from injector import Injector, Module, provider, singleton

from .config import Settings, get_settings
from ..app.component import ComponentFactory
from ..serial.registry import PropertyTranslatorRegistry, get_registry
from ..serial.serializer import TreeSerializer


class SerialModule(Module):
    """Process-wide codec dependencies."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        """Provide settings singleton."""
        return self.settings or get_settings()

    @singleton
    @provider
    def provide_registry(self) -> PropertyTranslatorRegistry:
        """Provide the shared translator registry with built-ins installed."""
        return get_registry()

    @singleton
    @provider
    def provide_component_factory(self) -> ComponentFactory:
        """Provide the component factory singleton."""
        return ComponentFactory()

    @singleton
    @provider
    def provide_serializer(
        self, registry: PropertyTranslatorRegistry, factory: ComponentFactory, settings: Settings
    ) -> TreeSerializer:
        """Provide tree serializer with all dependencies."""
        return TreeSerializer(registry, factory, settings)


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([SerialModule(settings)])
