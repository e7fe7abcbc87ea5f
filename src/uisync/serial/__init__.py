"""
Wire serialization
Property translators, component tree and style sheet codecs
"""

from .registry import (
    PropertyTranslator,
    PropertyTranslatorRegistry,
    create_registry,
    get_registry,
)
from .translators import install_builtin_translators
from .loader import Client, PropertyLoader, PropertyTarget
from .writer import PropertyWriter, to_string
from .stylesheet import load_style_sheet, store_style_sheet
from .client_message import (
    ClientUpdateBatch,
    ComponentAction,
    PropertyUpdate,
    parse_client_message,
    store_client_message,
)
from .serializer import Document, TreeSerializer

__all__ = [
    "PropertyTranslator",
    "PropertyTranslatorRegistry",
    "create_registry",
    "get_registry",
    "install_builtin_translators",
    "Client",
    "PropertyLoader",
    "PropertyTarget",
    "PropertyWriter",
    "to_string",
    "load_style_sheet",
    "store_style_sheet",
    "ClientUpdateBatch",
    "ComponentAction",
    "PropertyUpdate",
    "parse_client_message",
    "store_client_message",
    "Document",
    "TreeSerializer",
]
