"""
Logging setup and gesture event history.
"""

import os
import logging
import logging.handlers
import time


def setup_logging(level="INFO", log_file=None, max_size_mb=10, backup_count=3):
    """Configure logging for a host application embedding the gesture core."""
    console_format = "%(asctime)s  %(levelname)-5s  %(message)s"
    file_format = "%(asctime)s [%(levelname)-7s] %(name)-25s | %(message)s"
    date_format = "%H:%M:%S"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    root_logger.handlers.clear()

    # Console handler: INFO and above, short format
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter(console_format, datefmt=date_format))
    root_logger.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(file_format, datefmt=date_format))
        root_logger.addHandler(file_handler)

    return root_logger


def setup_logging_from_config(config):
    """Apply the ``logging`` section of a loaded Config."""
    settings = config.log_settings
    return setup_logging(
        level=settings.get("level", "INFO"),
        log_file=settings.get("file"),
        max_size_mb=settings.get("max_size_mb", 10),
        backup_count=settings.get("backup_count", 3),
    )


class GestureLogger:
    """Logs emitted gesture events and keeps a bounded history of them."""

    def __init__(self, max_history=500):
        self.logger = logging.getLogger("gesture_events")
        self._gesture_history = []
        self._max_history = max_history
        self._total = 0

    def log_gesture(self, gesture_name, timestamp_ms=None, source=None):
        """Log a debounced gesture event.

        Args:
            gesture_name: Emitted gesture value, e.g. "swipe-left"
            timestamp_ms: Frame timestamp the gate saw
            source: Which tier produced it ("geometry", "frame", "accumulated")
        """
        entry = {
            "timestamp": time.time(),
            "frame_time_ms": timestamp_ms,
            "gesture": gesture_name,
            "source": source,
        }
        self._gesture_history.append(entry)
        self._total += 1
        if len(self._gesture_history) > self._max_history:
            self._gesture_history = self._gesture_history[-self._max_history:]
        self.logger.info(
            "Gesture: %-12s | Source: %-11s | Frame time: %s",
            gesture_name,
            source or "n/a",
            f"{timestamp_ms:.0f}ms" if timestamp_ms is not None else "N/A",
        )

    def get_history(self, last_n=None):
        """Get recent gesture history."""
        if last_n:
            return self._gesture_history[-last_n:]
        return self._gesture_history.copy()

    def clear(self):
        self._gesture_history.clear()

    @property
    def total_gestures(self):
        """Count of every gesture logged, including ones trimmed from history."""
        return self._total
