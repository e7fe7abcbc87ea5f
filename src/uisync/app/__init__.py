"""Component model consumed by the serializer and the session layer."""

from .component import Component, ComponentFactory
from .application import ApplicationInstance, TaskQueueHandle
from .stylesheet import StyleSheet, StyleKey
from .values import (
    PropertyValue,
    Alignment,
    Border,
    Font,
    FillImage,
    FillImageBorder,
    ImageReference,
    Insets,
)

__all__ = [
    "Component",
    "ComponentFactory",
    "ApplicationInstance",
    "TaskQueueHandle",
    "StyleSheet",
    "StyleKey",
    "PropertyValue",
    "Alignment",
    "Border",
    "Font",
    "FillImage",
    "FillImageBorder",
    "ImageReference",
    "Insets",
]
