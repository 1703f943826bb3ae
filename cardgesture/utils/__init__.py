"""Configuration and logging utilities."""
from .logger import setup_logging, GestureLogger

__all__ = ["setup_logging", "GestureLogger"]
