"""
Tree Serializer
Entry points for encoding and decoding whole wire documents.
"""

from typing import Any, Mapping
from xml.etree import ElementTree as ET

from ..app.component import Component, ComponentFactory
from ..app.stylesheet import StyleSheet
from ..core import get_logger, get_settings, Settings, trace_operation
from ..core.errors import DecodeError
from ..core.validate import parse_document
from ..monitoring import metrics_collector
from .client_message import ClientUpdateBatch, parse_client_message, store_client_message
from .loader import Client, PropertyLoader
from .registry import PropertyTranslatorRegistry
from .stylesheet import load_style_sheet, store_style_sheet
from .writer import PropertyWriter, to_string

logger = get_logger(__name__)

Document = ET.Element | str | bytes


class TreeSerializer:
    """
    Encodes component trees and style sheets to wire documents and back.

    Inbound text documents are size- and depth-checked before decoding.
    Fatal decode errors propagate to the caller after being counted;
    nothing is partially returned.
    """

    def __init__(
        self,
        registry: PropertyTranslatorRegistry,
        factory: ComponentFactory,
        settings: Settings | None = None,
    ) -> None:
        self.registry = registry
        self.factory = factory
        self.settings = settings or get_settings()

    def _parse(self, document: Document, name: str) -> ET.Element:
        if isinstance(document, ET.Element):
            return document
        return parse_document(
            document,
            max_size=self.settings.max_document_size,
            max_depth=self.settings.max_tree_depth,
            name=name,
        )

    def loader(
        self,
        reference_map: Mapping[str, Any] | None = None,
        client: Client | None = None,
    ) -> PropertyLoader:
        """Create a loader for one decode pass."""
        return PropertyLoader(
            self.registry,
            factory=self.factory,
            client=client,
            reference_map=reference_map,
            reference_policy=self.settings.missing_reference_policy,
        )

    def writer(self, client: Any = None) -> PropertyWriter:
        return PropertyWriter(self.registry, client=client)

    def _decode(self, kind: str, decode: Any) -> Any:
        try:
            with trace_operation(f"decode_{kind}"):
                with metrics_collector.measure_duration(metrics_collector.observe_decode(kind)):
                    result = decode()
        except DecodeError as e:
            metrics_collector.record_document("decode", "error")
            metrics_collector.record_decode_error(type(e).__name__)
            logger.warning("decode_failed", kind=kind, error=str(e), error_type=type(e).__name__)
            raise
        metrics_collector.record_document("decode", "success")
        return result

    # ------------------------------------------------------------------
    # Component trees
    # ------------------------------------------------------------------

    def decode(
        self,
        document: Document,
        reference_map: Mapping[str, Any] | None = None,
        client: Client | None = None,
    ) -> Component:
        """
        Decode a component element into a new component tree.

        Args:
            document: ``c`` element, or its text
            reference_map: Previously materialized objects for ``r`` keys
            client: Listener-registration capability for ``e`` elements

        Raises:
            DecodeError: On fatally malformed input
        """
        loader = self.loader(reference_map, client)
        return self._decode(
            "component", lambda: loader.load_component(self._parse(document, "component"))
        )

    def encode(self, component: Component, client: Any = None) -> ET.Element:
        """Encode a component tree into a ``c`` element."""
        with trace_operation("encode_component", component=component.render_id):
            element = self.writer(client).store_component(component)
        metrics_collector.record_document("encode", "success")
        return element

    def encode_to_string(self, component: Component, client: Any = None) -> str:
        return to_string(self.encode(component, client))

    # ------------------------------------------------------------------
    # Style sheets
    # ------------------------------------------------------------------

    def load_style_sheet(
        self, document: Document, reference_map: Mapping[str, Any] | None = None
    ) -> StyleSheet:
        """Decode a style sheet element."""
        loader = self.loader(reference_map)
        return self._decode(
            "style_sheet", lambda: load_style_sheet(loader, self._parse(document, "style sheet"))
        )

    def store_style_sheet(self, style_sheet: StyleSheet) -> ET.Element:
        """Encode a style sheet element."""
        element = store_style_sheet(self.writer(), style_sheet)
        metrics_collector.record_document("encode", "success")
        return element

    # ------------------------------------------------------------------
    # Client messages
    # ------------------------------------------------------------------

    def load_client_message(
        self, document: Document, reference_map: Mapping[str, Any] | None = None
    ) -> ClientUpdateBatch:
        """Decode a client message into a batch for the transaction gate."""
        loader = self.loader(reference_map)
        return self._decode(
            "client_message",
            lambda: parse_client_message(loader, self._parse(document, "client message")),
        )

    def store_client_message(self, batch: ClientUpdateBatch) -> ET.Element:
        return store_client_message(self.writer(), batch)


__all__ = ["Document", "TreeSerializer"]
