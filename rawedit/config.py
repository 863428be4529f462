"""Constants and user configuration for the rawedit editor.

User settings live in a JSON file in the platform's config directory.
A missing file means defaults; a broken one is reported to the log and
ignored so the editor always starts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

logger = logging.getLogger(__name__)


class EditorConstants:
    """Central configuration constants for the editor."""

    APP_NAME = "rawedit"

    # Rendering
    PLACEHOLDER = "~"  # Marks rows past the end of the document
    WELCOME_MESSAGE = "rawedit -- version {}"
    NO_NAME = "[No Name]"
    # Control characters in the text are drawn as one reverse-video cell
    TAB_GLYPH = ">"
    CONTROL_GLYPH = "?"

    # Resize / stop handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize
    STOP_PIPE_MARKER = b'S'  # Byte written to pipe when a stop is requested

    # Status messages
    HELP_MESSAGE = "Ctrl-S = save | Ctrl-Q = quit"
    ESCAPE_MESSAGE = "ESC pressed -- Ctrl-Q to quit"
    SAVE_PROMPT = "Save as: {}"
    SAVE_CANCELLED_MESSAGE = "Save cancelled"
    SAVED_MESSAGE = "{} bytes written to {}"
    SAVE_FAILED_MESSAGE = "Can't save! I/O error: {}"
    LOAD_FAILED_MESSAGE = "Can't open {}: {}"

    # Config file
    CONFIG_FILENAME = "config.json"


@dataclass
class EditorConfig:
    """User-tunable settings."""
    show_welcome: bool = True
    placeholder: str = EditorConstants.PLACEHOLDER
    log_file: Optional[str] = None
    log_level: str = "DEBUG"

    @classmethod
    def default_path(cls) -> Path:
        return Path(platformdirs.user_config_dir(EditorConstants.APP_NAME)) / EditorConstants.CONFIG_FILENAME

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Build a config from parsed JSON, skipping bad or unknown keys."""
        config = cls()
        known = {f.name: f for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown config key %r", key)
                continue
            default = getattr(config, key)
            expected = type(default) if default is not None else str
            if not isinstance(value, expected):
                logger.warning("Config key %r should be %s, got %r", key, expected.__name__, value)
                continue
            setattr(config, key, value)

        if len(config.placeholder) != 1:
            logger.warning("Placeholder must be a single character, got %r", config.placeholder)
            config.placeholder = EditorConstants.PLACEHOLDER
        return config

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "EditorConfig":
        """Load settings from ``path`` (defaults to the user config file)."""
        path = path or cls.default_path()
        if not path.exists():
            return cls()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load config from {path}: {e}")
            return cls()

        if not isinstance(data, dict):
            logger.warning("Config file has invalid format (not a dict), ignoring")
            return cls()
        return cls.from_dict(data)
