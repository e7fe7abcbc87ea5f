"""
Session state
Per-session render state, transaction ids and the client update gate.
"""

from .context import (
    CLIENT_RENDER_ID_PREFIX,
    CONTAINER_CONTEXT_PROPERTY,
    PROPERTY_CLIENT_CONFIGURATION,
    SessionContext,
    SessionSnapshot,
)
from .gate import ResyncDirective, TransactionGate
from .id_table import IdTable
from .intervals import DEFAULT_CALLBACK_INTERVAL, CallbackIntervals

__all__ = [
    "CLIENT_RENDER_ID_PREFIX",
    "CONTAINER_CONTEXT_PROPERTY",
    "PROPERTY_CLIENT_CONFIGURATION",
    "SessionContext",
    "SessionSnapshot",
    "ResyncDirective",
    "TransactionGate",
    "IdTable",
    "DEFAULT_CALLBACK_INTERVAL",
    "CallbackIntervals",
]
