"""
UI state synchronization core.

Mirrors a server-held component tree into a browser runtime through a compact
XML wire document and guards client updates with per-session transaction ids.
"""

__version__ = "0.3.0"
