"""
Events Module - Black Box Interface

Purpose: Deliver client-level notifications to registered observers
Interface: on(), once(), off(), emit()
Hidden: Listener bookkeeping, sync/async listener dispatch

Events: "ready" (descriptor loaded) and "error" (transport failure).
"""

from .observers import ERROR, READY, EventRegistry

__all__ = ["EventRegistry", "READY", "ERROR"]
