"""Style sheet: named, typed bags of default property values."""

from typing import Any, Iterator


StyleKey = tuple[str, str | None]


class StyleSheet:
    """
    Mapping from (style name, component type) to a property bag.

    A style without a type applies to any component naming it. Setting a
    style for an existing key replaces the previous bag.
    """

    def __init__(self) -> None:
        self._styles: dict[StyleKey, dict[str, Any]] = {}

    def set_style(self, name: str, type_name: str | None, style: dict[str, Any]) -> None:
        self._styles[(name, type_name)] = style

    def get_style(self, name: str, type_name: str | None = None) -> dict[str, Any] | None:
        return self._styles.get((name, type_name))

    def resolve(self, name: str, type_name: str) -> dict[str, Any] | None:
        """Typed style first, falling back to the untyped style of that name."""
        style = self._styles.get((name, type_name))
        if style is None:
            style = self._styles.get((name, None))
        return style

    def keys(self) -> list[StyleKey]:
        return list(self._styles)

    def __iter__(self) -> Iterator[tuple[StyleKey, dict[str, Any]]]:
        return iter(self._styles.items())

    def __len__(self) -> int:
        return len(self._styles)

    def __contains__(self, key: StyleKey) -> bool:
        return key in self._styles


__all__ = ["StyleSheet", "StyleKey"]
