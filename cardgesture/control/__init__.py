"""Event debouncing."""
from .debouncer import DebounceGate

__all__ = ["DebounceGate"]
