"""Configuration: defaults, optional YAML file, then environment overrides."""

import logging
import os
from dataclasses import dataclass, fields

import yaml

logger = logging.getLogger(__name__)

VALID_COLOR_MODES = ("auto", "always", "never")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(val: str | None, default: bool) -> bool:
    if val is None:
        return default
    return val.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    grace_ms: int = 33
    color: str = "auto"
    utc: bool = False
    method_width: int = 6
    elapsed_width: int = 8
    log_level: str = "WARNING"

    @property
    def grace_seconds(self) -> float:
        return self.grace_ms / 1000

    def color_enabled(self, stream) -> bool:
        """Resolve the color mode against the stream output is written to."""
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())


def _load_yaml(path: str) -> dict:
    """Read a YAML mapping from *path*. Missing or invalid files yield {}."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError:
        logger.warning("Invalid YAML in %s, using defaults", path)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return {}
    return data


def _coerce(name: str, value, current):
    """Convert *value* to the type of the field's current value.

    Returns *current* (and logs a warning) when the value doesn't fit.
    """
    try:
        if isinstance(current, bool):
            if isinstance(value, str):
                return _parse_bool(value, current)
            return bool(value)
        if isinstance(current, int):
            coerced = int(value)
            if coerced < 0:
                raise ValueError(value)
            return coerced
    except (TypeError, ValueError):
        logger.warning("Invalid value %r for %s, keeping %r", value, name, current)
        return current

    text = str(value).strip()
    if name == "color":
        text = text.lower()
        if text not in VALID_COLOR_MODES:
            logger.warning("Invalid color mode '%s', keeping '%s'", text, current)
            return current
    elif name == "log_level":
        text = text.upper()
        if text not in VALID_LOG_LEVELS:
            logger.warning("Invalid log level '%s', keeping '%s'", text, current)
            return current
    return text


def load_config(path: str | None = None) -> Config:
    """Build a Config from defaults, an optional YAML file and DEVLOG_* variables.

    The file path falls back to ``DEVLOG_CONFIG``. Unknown keys are
    ignored with a warning.
    """
    values = {f.name: f.default for f in fields(Config)}

    path = path or os.environ.get("DEVLOG_CONFIG")
    if path:
        for key, value in _load_yaml(path).items():
            if key not in values:
                logger.warning("Unknown config key '%s' in %s, ignoring", key, path)
                continue
            values[key] = _coerce(key, value, values[key])

    env_overrides = {
        "grace_ms": os.environ.get("DEVLOG_GRACE_MS"),
        "color": os.environ.get("DEVLOG_COLOR"),
        "utc": os.environ.get("DEVLOG_UTC"),
        "log_level": os.environ.get("DEVLOG_LOG_LEVEL"),
    }
    for key, value in env_overrides.items():
        if value is not None:
            values[key] = _coerce(key, value, values[key])

    return Config(**values)
