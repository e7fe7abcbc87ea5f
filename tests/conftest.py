"""Pytest configuration and fixtures."""

import os
from typing import Any

import pytest

from uisync.app import ApplicationInstance, Component, ComponentFactory
from uisync.core import Settings
from uisync.serial import PropertyTranslatorRegistry, TreeSerializer, create_registry
from uisync.session import SessionContext


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ['UISYNC_LOG_LEVEL'] = 'DEBUG'
    os.environ['UISYNC_DEFAULT_CALLBACK_INTERVAL'] = '500'


# ============================================================================
# Sample component kinds
# ============================================================================

class Label(Component):
    type_name = "Label"


class Button(Component):
    type_name = "Button"


class Row(Component):
    type_name = "Row"


class TextField(Component):
    type_name = "TextField"
    input_properties = frozenset({"text", "selection"})


class ListBox(Component):
    type_name = "ListBox"
    property_methods = frozenset({"select", "set_style_name"})
    input_properties = frozenset({"selection"})

    def select(self, *args: Any) -> None:
        if len(args) == 2:
            self.set_index("selected", args[0], args[1])
        else:
            self.set("selected", args[0])


class SampleApplication(ApplicationInstance):
    """Row holding a label, a text field and a button."""

    def init(self) -> Component:
        root = Row()
        root.add(Label())
        root.add(TextField())
        root.add(Button())
        return root


class RecordingClient:
    """Client collaborator that records listener registrations."""

    def __init__(self) -> None:
        self.listeners: list[tuple[Component, str]] = []

    def add_component_listener(self, component: Component, event_type: str) -> None:
        self.listeners.append((component, event_type))

    def decompress_url(self, url: str) -> str:
        return url.replace("~", "/static/images/")


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Test settings."""
    return Settings()


@pytest.fixture
def registry() -> PropertyTranslatorRegistry:
    """Fresh registry with built-in translators."""
    return create_registry()


@pytest.fixture
def factory() -> ComponentFactory:
    """Component factory with the sample kinds."""
    factory = ComponentFactory()
    for kind in (Label, Button, Row, TextField, ListBox):
        factory.register(kind)
    return factory


@pytest.fixture
def serializer(registry, factory, settings) -> TreeSerializer:
    """Tree serializer over the fresh registry."""
    return TreeSerializer(registry, factory, settings)


@pytest.fixture
def client() -> RecordingClient:
    return RecordingClient()


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def session(settings) -> SessionContext:
    """Uninitialized session."""
    return SessionContext({"lang": "en"}, settings=settings)


@pytest.fixture
def live_session(session) -> SessionContext:
    """Session initialized with the sample application."""
    session.init(SampleApplication)
    return session
