"""
Runtime settings.

Defaults come from environment variables so the checker can be tuned in CI
without changing the command line; CLI flags override them.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_OUTPUT_FORMAT = "text"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")
OUTPUT_FORMATS = ("text", "json", "yaml")

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    output_format: str = DEFAULT_OUTPUT_FORMAT
    color: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Read settings from the environment.

        Variables:
            STORAGE_GUARD_LOG_LEVEL: One of LOG_LEVELS
            STORAGE_GUARD_LOG_FORMAT: "console" or "json"
            STORAGE_GUARD_OUTPUT_FORMAT: "text", "json" or "yaml"
            STORAGE_GUARD_COLOR: Set to 0/false to disable bold output
            NO_COLOR: Disables bold output when set to anything
        """
        env = os.environ if environ is None else environ

        log_level = env.get("STORAGE_GUARD_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {log_level}. Supported: {', '.join(LOG_LEVELS)}")

        log_format = env.get("STORAGE_GUARD_LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(f"Unsupported log format: {log_format}. Supported: {', '.join(LOG_FORMATS)}")

        output_format = env.get("STORAGE_GUARD_OUTPUT_FORMAT", DEFAULT_OUTPUT_FORMAT).lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unsupported output format: {output_format}. Supported: {', '.join(OUTPUT_FORMATS)}"
            )

        color = env.get("STORAGE_GUARD_COLOR", "1").lower() not in _FALSE_VALUES and "NO_COLOR" not in env

        return cls(
            log_level=log_level,
            log_format=log_format,
            output_format=output_format,
            color=color,
        )
