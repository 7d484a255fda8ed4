"""Configuration loading and management for vocal-phrases.

Handles segmentation limits, rehearsal-mark delimiters, tokenizer choice
and logging settings, stored as JSON.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from vocal_phrases.errors import ConfigurationError, ErrorContext
from vocal_phrases.logging import LogConfig, LogLevel

CONFIG_ENV_VAR = "VOCAL_PHRASES_CONFIG"


class SegmentationConfig(BaseModel):
    """Settings that shape how lyrics are cut into phrases."""

    # Lines with more groups than this get the tail folded into the last slot
    max_phrases_per_line: int = Field(default=10, ge=1)
    # Manual splits are refused once a line holds this many lyric phrases
    max_phrases_per_line_after_split: int = Field(default=12, ge=1)
    # A line that is exactly marker_open + label + marker_close is a rehearsal mark
    marker_open: str = "【"
    marker_close: str = "】"
    # "mecab" uses the morphological tokenizer, "whitespace" skips it
    tokenizer: Literal["mecab", "whitespace"] = "mecab"


class AppConfig(BaseModel):
    """Top-level configuration file contents."""

    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    log_level: Literal["quiet", "normal", "verbose", "debug"] = "normal"
    log_file: str | None = None
    log_json: bool = False

    def to_log_config(self) -> LogConfig:
        """Build the logging configuration described by this config."""
        return LogConfig(
            level=LogLevel.from_name(self.log_level),
            log_file=Path(self.log_file) if self.log_file else None,
            json_format=self.log_json,
        )


def load_config(path: Path | str) -> AppConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file

    Returns:
        AppConfig object

    Raises:
        ConfigurationError: If the file is missing, not JSON, or invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            f"Config file not found: {config_path}",
            context={"path": str(config_path)},
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
        return AppConfig(**data)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Config file is not valid JSON: {e}",
            context={"path": str(config_path)},
        ) from e
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s)",
            context={"path": str(config_path), "errors": e.errors(include_url=False)},
        ) from e


def save_config(path: Path | str, config: AppConfig) -> Path:
    """Save configuration to a JSON file with atomic write.

    Args:
        path: Destination path
        config: AppConfig object to save

    Returns:
        Path to the saved config file
    """
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = config_path.with_name(config_path.name + ".tmp")

    # Atomic write: write to temp file, then rename
    with ErrorContext(
        "save_config",
        rollback=lambda: temp_path.unlink(missing_ok=True),
        context={"path": str(config_path)},
    ):
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
        temp_path.replace(config_path)
    return config_path


def load_config_from_env() -> AppConfig:
    """Load the config named by VOCAL_PHRASES_CONFIG, or defaults if unset."""
    path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return AppConfig()
    return load_config(path)
