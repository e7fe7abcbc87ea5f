"""Tests for the property translator registry."""

from datetime import date, datetime
from xml.etree.ElementTree import Element

import pytest

from uisync.app import Font
from uisync.core import RegistryError
from uisync.serial import PropertyTranslator, PropertyTranslatorRegistry, create_registry, get_registry


class UpperTranslator(PropertyTranslator):
    type_name = "UP"
    writable = True

    def to_property(self, loader, element: Element):
        return (element.text or "").upper()

    def to_xml(self, writer, element: Element, value) -> None:
        element.text = str(value)


@pytest.mark.unit
def test_register_and_resolve_by_tag():
    """Registered tags resolve; unknown tags resolve to None."""
    registry = PropertyTranslatorRegistry()
    translator = UpperTranslator()
    registry.register("UP", translator)

    assert registry.resolve("UP") is translator
    assert registry.resolve("zzz") is None
    assert "UP" in registry


@pytest.mark.unit
def test_last_registration_wins():
    """Re-registering a tag or type replaces the earlier translator."""
    registry = PropertyTranslatorRegistry()
    first, second = UpperTranslator(), UpperTranslator()

    registry.register("UP", first)
    registry.register("UP", second)
    registry.register_by_type(bytes, first)
    registry.register_by_type(bytes, second)

    assert registry.resolve("UP") is second
    assert registry.resolve_by_type(bytes) is second


@pytest.mark.unit
def test_resolve_by_type_is_exact():
    """Runtime type lookup does not match subclasses."""
    registry = create_registry()

    assert registry.resolve_by_type(date) is registry.resolve("d")
    assert registry.resolve_by_type(datetime) is None


@pytest.mark.unit
def test_resolve_for_value_prefers_class_tag():
    """A value's class tag wins over its runtime type."""
    registry = create_registry()
    tagged = UpperTranslator()
    registry.register_by_type(Font, tagged)

    assert registry.resolve_for_value(Font(size="10pt")) is registry.resolve("Font")


@pytest.mark.unit
def test_resolve_for_value_falls_back_to_type():
    """Values without a class tag resolve by type."""
    registry = create_registry()

    assert registry.resolve_for_value({"a": 1}) is registry.resolve("m")
    assert registry.resolve_for_value(object()) is None


@pytest.mark.unit
def test_builtins_registered_under_long_and_short_tags():
    """Composite translators answer to both tag forms."""
    registry = create_registry()

    for long_name, short_name in [
        ("Alignment", "AL"),
        ("Border", "BO"),
        ("Extent", "X"),
        ("FillImage", "FI"),
        ("FillImageBorder", "FIB"),
        ("Font", "F"),
        ("ImageReference", "I"),
        ("Insets", "N"),
        ("LayoutData", "L"),
    ]:
        assert registry.resolve(long_name) is registry.resolve(short_name)

    for scalar in ("0", "b", "i", "f", "s", "d", "m"):
        assert scalar in registry


@pytest.mark.unit
def test_sealed_registry_rejects_registration():
    """Registration after seal() is a lifecycle error."""
    registry = PropertyTranslatorRegistry()
    registry.seal()

    assert registry.sealed
    with pytest.raises(RegistryError):
        registry.register("UP", UpperTranslator())
    with pytest.raises(RegistryError):
        registry.register_by_type(bytes, UpperTranslator())


@pytest.mark.unit
def test_get_registry_is_shared():
    """The process-wide registry is created once."""
    assert get_registry() is get_registry()
    assert "Font" in get_registry()
