"""
Helper utilities for termsearch.

Provides the pieces the command line needs around the core:
- Settings loading (TOML, merged over defaults)
- Log file setup
- Reading the current text selection
- Opening URLs and files with the desktop handler
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"

# Commands tried in order to read the primary selection
SELECTION_COMMANDS = [
    ["wl-paste", "--primary", "--no-newline"],
    ["xclip", "-o", "-selection", "primary"],
]


@dataclass
class Settings:
    """Resolved runtime configuration."""
    catalog_path: Path
    log_path: Path
    log_level: str = "DEBUG"
    browser_command: str = "xdg-open"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        return cls(
            catalog_path=Path(data["catalog"]["path"]).expanduser(),
            log_path=Path(data["logging"]["path"]).expanduser(),
            log_level=str(data["logging"]["level"]).upper(),
            browser_command=data["browser"]["command"],
        )


def default_settings() -> Dict[str, Any]:
    """
    Default settings structure.

    Example settings.toml overriding some of them:
        [catalog]
        path = "~/Sync/search_config.toml"

        [browser]
        command = "firefox"
    """
    return {
        "catalog": {
            "path": "~/.search_config.toml",
        },
        "logging": {
            "path": "~/.search.log",
            "level": "DEBUG",
        },
        "browser": {
            "command": "xdg-open",
        },
    }


def settings_file() -> Path:
    """Settings location: $TERMSEARCH_SETTINGS or ~/.config/termsearch/settings.toml."""
    override = os.environ.get("TERMSEARCH_SETTINGS")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "termsearch" / "settings.toml"


def load_settings(settings_path: Optional[Path] = None) -> Settings:
    """
    Load settings from a TOML file.

    Args:
        settings_path: File to read, defaults to settings_file()

    Returns:
        Settings with defaults applied for anything the file leaves out.
        A missing or unreadable file yields the defaults.
    """
    defaults = default_settings()
    settings_path = Path(settings_path) if settings_path else settings_file()

    if not settings_path.exists():
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return Settings.from_dict(defaults)

    try:
        loaded = toml.load(settings_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning(f"Could not load settings from {settings_path}: {e}")
        return Settings.from_dict(defaults)

    return Settings.from_dict(_deep_merge(defaults, loaded))


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def setup_logging(settings: Settings) -> None:
    """Send all log records to the configured log file only."""
    logger.remove()
    settings.log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(settings.log_path, format=LOG_FORMAT, level=settings.log_level)


def get_selected_text() -> str:
    """
    Read the current primary selection.

    Returns:
        Selected text, or "" if no selection tool is available
    """
    for command in SELECTION_COMMANDS:
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=1,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired):
            continue
        if result.returncode == 0:
            return result.stdout
        logger.debug(f"{command[0]} exited with {result.returncode}")

    logger.warning("Unable to read the current selection")
    return ""


def open_url(target: str, command: str = "xdg-open") -> bool:
    """
    Open a URL or file with the desktop handler.

    Args:
        target: URL or file path
        command: Program used to open it

    Returns:
        True if the program was started
    """
    try:
        subprocess.Popen(
            [command, str(target)],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except (FileNotFoundError, PermissionError):
        logger.warning(f"{command} not found, cannot open {target}")
        return False

    logger.info(f"Opened {target} with {command}")
    return True
