"""
Configuration for hookdef.

Values come from environment variables, after loading a ``.env`` file found
from the current working directory upwards. Command-line flags override them.

    HOOKDEF_RUNNER            command the generated settings entries call (default: hookdef-run)
    HOOKDEF_GLOBAL_SETTINGS   user-scope settings document (default: ~/.claude/settings.json)
    HOOKDEF_DESCRIBE_TIMEOUT  seconds to wait for a declaration file in describe mode (default: 30)
    HOOKDEF_LOG_LEVEL         log level for both the CLI and the runner
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv, find_dotenv

from .logger import logger

DEFAULT_RUNNER = "hookdef-run"
DEFAULT_DESCRIBE_TIMEOUT = 30.0


def load_env():
    _ = load_dotenv(find_dotenv(usecwd=True))


def default_global_settings_path() -> Path:
    """The host's user-wide settings document."""
    return Path.home() / ".claude" / "settings.json"


@dataclass
class HookdefConfig:
    """Resolved configuration values."""

    runner: str = DEFAULT_RUNNER
    global_settings_path: Optional[Path] = None
    describe_timeout: float = DEFAULT_DESCRIBE_TIMEOUT
    log_level: Optional[str] = None  # None lets each entry point pick its default

    def resolved_global_settings_path(self) -> Path:
        return self.global_settings_path or default_global_settings_path()


def _parse_timeout(value: str) -> float:
    """Parse and validate the describe timeout."""
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"Invalid HOOKDEF_DESCRIBE_TIMEOUT: {value!r}")
    if timeout <= 0:
        raise ValueError(f"HOOKDEF_DESCRIBE_TIMEOUT must be positive, got {timeout}")
    return timeout


def _parse_log_level(value: Optional[str]) -> Optional[str]:
    """Check a log level name against the levels loguru knows."""
    if not value:
        return None
    try:
        logger.level(value.upper())
    except ValueError:
        raise ValueError(f"Invalid HOOKDEF_LOG_LEVEL: {value!r}")
    return value.upper()


def load_config() -> HookdefConfig:
    """
    Build the configuration from the environment.

    Returns:
        HookdefConfig

    Raises:
        ValueError: If a variable has an invalid value
    """
    load_env()

    global_settings = os.getenv("HOOKDEF_GLOBAL_SETTINGS")
    return HookdefConfig(
        runner=os.getenv("HOOKDEF_RUNNER") or DEFAULT_RUNNER,
        global_settings_path=Path(global_settings).expanduser() if global_settings else None,
        describe_timeout=_parse_timeout(
            os.getenv("HOOKDEF_DESCRIBE_TIMEOUT", str(DEFAULT_DESCRIBE_TIMEOUT))
        ),
        log_level=_parse_log_level(os.getenv("HOOKDEF_LOG_LEVEL")),
    )
