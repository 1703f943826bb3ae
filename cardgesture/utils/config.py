"""
Centralized configuration manager.
Loads the YAML gesture config and provides typed access with defaults.

    - File values are deep-merged over built-in defaults
    - Schema validation logs a warning and keeps the default for bad fields
    - Reset support for testing
"""

import os
import copy
import logging
from dataclasses import dataclass, asdict

import yaml

from cardgesture.control.debouncer import DEFAULT_COOLDOWN_MS
from cardgesture.recognition.dispatcher import SWIPE_FRAME_THRESHOLD
from cardgesture.recognition.geometry import FIST_THRESHOLD, OPEN_THRESHOLD
from cardgesture.recognition.motion_tracker import SWIPE_THRESHOLD, MAX_FRAMES, MotionTrackerConfig

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
_CONFIG_DIR = os.path.join(_BASE_DIR, "config")

CARD_SELECTOR_COOLDOWN_MS = 600

_DEFAULTS = {
    "recognition": {
        "fist_threshold": FIST_THRESHOLD,
        "open_threshold": OPEN_THRESHOLD,
        "swipe_frame_threshold": SWIPE_FRAME_THRESHOLD,
        "swipe_threshold": SWIPE_THRESHOLD,
        "max_frames": MAX_FRAMES,
    },
    "debouncing": {
        "cooldown_ms": CARD_SELECTOR_COOLDOWN_MS,
        "reset_gate_on_hand_loss": False,
    },
    "logging": {
        "level": "INFO",
        "file": None,
        "max_size_mb": 10,
        "backup_count": 3,
    },
}

# Schema: sections and their expected types
_CONFIG_SCHEMA = {
    "recognition": {
        "fist_threshold": float,
        "open_threshold": float,
        "swipe_frame_threshold": float,
        "swipe_threshold": float,
        "max_frames": int,
    },
    "debouncing": {
        "cooldown_ms": float,
        "reset_gate_on_hand_loss": bool,
    },
    "logging": {
        "level": str,
        "file": (str, type(None)),
        "max_size_mb": int,
        "backup_count": int,
    },
}

_POSITIVE_FIELDS = {"recognition.max_frames", "logging.max_size_mb"}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _type_ok(value, expected_type) -> bool:
    if isinstance(expected_type, tuple):
        return any(_type_ok(value, t) for t in expected_type)
    # bool is an int subclass; never accept it for numeric fields
    if isinstance(value, bool):
        return expected_type is bool
    if expected_type is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected_type)


def _type_name(expected_type) -> str:
    if isinstance(expected_type, tuple):
        return " or ".join(t.__name__ for t in expected_type)
    return expected_type.__name__


@dataclass
class GestureConfig:
    """Tunable thresholds for one gesture session."""
    fist_threshold: float = FIST_THRESHOLD
    open_threshold: float = OPEN_THRESHOLD
    swipe_frame_threshold: float = SWIPE_FRAME_THRESHOLD
    swipe_threshold: float = SWIPE_THRESHOLD
    max_frames: int = MAX_FRAMES
    cooldown_ms: float = DEFAULT_COOLDOWN_MS
    reset_gate_on_hand_loss: bool = False

    def __post_init__(self):
        for name in ("fist_threshold", "open_threshold", "swipe_frame_threshold",
                     "swipe_threshold", "cooldown_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_frames <= 0:
            raise ValueError(f"max_frames must be > 0, got {self.max_frames}")

    @classmethod
    def from_dict(cls, config: dict) -> "GestureConfig":
        """Create config from a ``{recognition: ..., debouncing: ...}`` dictionary."""
        recognition = config.get("recognition", {}) or {}
        debouncing = config.get("debouncing", {}) or {}
        return cls(
            fist_threshold=recognition.get("fist_threshold", FIST_THRESHOLD),
            open_threshold=recognition.get("open_threshold", OPEN_THRESHOLD),
            swipe_frame_threshold=recognition.get("swipe_frame_threshold", SWIPE_FRAME_THRESHOLD),
            swipe_threshold=recognition.get("swipe_threshold", SWIPE_THRESHOLD),
            max_frames=recognition.get("max_frames", MAX_FRAMES),
            cooldown_ms=debouncing.get("cooldown_ms", DEFAULT_COOLDOWN_MS),
            reset_gate_on_hand_loss=debouncing.get("reset_gate_on_hand_loss", False),
        )

    def motion_tracker_config(self) -> MotionTrackerConfig:
        return MotionTrackerConfig(swipe_threshold=self.swipe_threshold, max_frames=self.max_frames)

    def to_dict(self) -> dict:
        return asdict(self)


class Config:
    """Singleton configuration manager."""

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = copy.deepcopy(_DEFAULTS)
        return cls._instance

    def load(self, config_path=None):
        """Load configuration from a YAML file, keeping defaults for anything missing."""
        config_path = config_path or os.path.join(_CONFIG_DIR, "gestures.yaml")

        file_data = {}
        try:
            with open(config_path, "r") as f:
                file_data = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)
        except yaml.YAMLError as e:
            logger.warning("Config file %s is not valid YAML (%s), using defaults", config_path, e)

        if not isinstance(file_data, dict):
            logger.warning("Config root should be a mapping, got %s; using defaults",
                           type(file_data).__name__)
            file_data = {}

        self._data = _deep_merge(copy.deepcopy(_DEFAULTS), file_data)
        self._validate()

        return self

    def _validate(self):
        """Validate fields against the schema, restoring defaults for bad values."""
        warnings = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if not isinstance(section, dict):
                warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
                self._data[section_name] = copy.deepcopy(_DEFAULTS[section_name])
                continue
            for field_name, expected_type in fields.items():
                if field_name not in section:
                    continue
                value = section[field_name]
                default = _DEFAULTS[section_name][field_name]
                if not _type_ok(value, expected_type):
                    warnings.append(
                        f"{section_name}.{field_name}: expected {_type_name(expected_type)}, "
                        f"got {type(value).__name__} ({value!r})"
                    )
                    section[field_name] = default
                elif expected_type in (int, float):
                    key = f"{section_name}.{field_name}"
                    too_small = value <= 0 if key in _POSITIVE_FIELDS else value < 0
                    if too_small:
                        warnings.append(f"{key}: out of range ({value!r})")
                        section[field_name] = default

        if warnings:
            for w in warnings:
                logger.warning("Config validation: %s", w)
        else:
            logger.debug("Config validation passed")

    def get(self, key_path: str, default=None):
        """Get nested config value using dot notation: 'recognition.max_frames'."""
        keys = key_path.split(".")
        value = self._data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict:
        """Get an entire config section."""
        return self._data.get(section, {})

    @property
    def recognition(self) -> dict:
        return self._data.get("recognition", {})

    @property
    def debouncing(self) -> dict:
        return self._data.get("debouncing", {})

    @property
    def log_settings(self) -> dict:
        return self._data.get("logging", {})

    def gesture_config(self) -> GestureConfig:
        """Build the typed session config from the loaded values."""
        return GestureConfig.from_dict(self._data)

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._data = {}
