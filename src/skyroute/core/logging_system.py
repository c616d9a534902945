"""Application logging setup driven by YAML configuration.

Library modules only call logging.getLogger(__name__). This module is used
by the command-line entry point to decide where those records go: console,
a combined log file in a platform-aware directory, and per-component
levels.

Platform-specific log locations:
    - macOS: ~/Library/Logs/SkyRoute/skyroute.log
    - Linux: ~/.skyroute/logs/skyroute.log
    - Windows: %AppData%/SkyRoute/Logs/skyroute.log

Each start rotates logs, keeping the last 5 runs.

Typical usage example:
    from skyroute.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("skyroute.cli")
    log.info("Loaded %d waypoints", count)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

_logging_config: dict[str, Any] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when logging system operations fail."""


def get_platform_log_dir() -> Path:
    """Get platform-specific log directory.

    Returns:
        Path to the platform-appropriate log directory:
        - macOS: ~/Library/Logs/SkyRoute
        - Linux: ~/.skyroute/logs
        - Windows: %AppData%/SkyRoute/Logs
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "SkyRoute"
    elif system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "SkyRoute" / "Logs"
    else:
        return Path.home() / ".skyroute" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = "skyroute.log", keep_count: int = 5) -> None:
    """Rotate logs on startup, keeping the last N runs.

    Renames the current log to skyroute.log.1, shifts older logs, and
    deletes logs beyond keep_count.

    Args:
        log_dir: Directory containing log files.
        log_filename: Base name of the log file.
        keep_count: Number of old logs to keep.
    """
    log_file = log_dir / log_filename

    if not log_file.exists():
        return

    oldest_log = log_dir / f"{log_filename}.{keep_count}"
    if oldest_log.exists():
        oldest_log.unlink()

    for i in range(keep_count - 1, 0, -1):
        old_log = log_dir / f"{log_filename}.{i}"
        if old_log.exists():
            old_log.rename(log_dir / f"{log_filename}.{i + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(
    config_path: str | Path | None = None,
    use_platform_dir: bool = True,
    console_level: str | None = None,
) -> None:
    """Initialize logging from YAML configuration.

    Call once at startup, before anything is logged.

    Args:
        config_path: Logging configuration YAML file, or None for defaults.
        use_platform_dir: Write logs to the platform log directory instead
            of the directory named in the configuration.
        console_level: Overrides the configured console level (e.g. "DEBUG").

    Raises:
        LoggingError: If the configuration cannot be loaded or applied.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")
        try:
            with config_path.open("r", encoding="utf-8") as f:
                _logging_config = _merge(_get_default_config(), yaml.safe_load(f) or {})
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())
    if console_level:
        _logging_config["console"]["level"] = console_level.upper()

    try:
        log_dir = Path(_logging_config["log_dir"])
        log_dir.mkdir(parents=True, exist_ok=True)

        combined = _logging_config["combined_log"]
        rotate_logs(log_dir, combined["filename"], combined["backup_count"])

        _configure_root_logger()
        _configure_components()
    except (OSError, AttributeError, KeyError, ValueError) as e:
        raise LoggingError(f"Failed to initialize logging: {e}") from e

    _initialized = True


def _get_default_config() -> dict[str, Any]:
    return {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "combined_log": {
            "enabled": True,
            "filename": "skyroute.log",
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "INFO",
        },
        "components": {},
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _configure_root_logger() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, filter in handlers
    root_logger.handlers.clear()

    console = _logging_config["console"]
    if console.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console.get("level", "INFO")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    combined = _logging_config["combined_log"]
    if combined.get("enabled", True):
        log_file = Path(_logging_config["log_dir"]) / combined["filename"]
        # Rotation already happened on startup.
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


def _configure_components() -> None:
    """Apply per-logger levels from the 'components' section."""
    for name, settings in _logging_config.get("components", {}).items():
        component_logger = logging.getLogger(name)
        if not settings.get("enabled", True):
            component_logger.disabled = True
        elif "level" in settings:
            component_logger.setLevel(getattr(logging, settings["level"]))


class MillisecondFormatter(logging.Formatter):
    """Formatter that shows milliseconds with a dot separator."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        s = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{s}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    return MillisecondFormatter(_logging_config["format"], _logging_config["date_format"])


def get_logger(name: str) -> logging.Logger:
    """Get a logger, initializing logging with defaults on first use.

    Args:
        name: Logger name.

    Note:
        Use lazy formatting (%) instead of f-strings.
    """
    if not _initialized:
        initialize_logging()
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush and close all handlers."""
    global _initialized

    logging.shutdown()
    logging.getLogger().handlers.clear()
    _initialized = False
