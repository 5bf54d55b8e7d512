"""Structlog-based logging configuration for birbs.

Supports different deployment targets:
- Docker: stdout with JSON output
- systemd hosts: JSON output to stdout for the journal
- Development: human-readable console output, JSON on request
"""

import logging
import os
import subprocess
import sys
from collections.abc import Callable
from typing import Any

import structlog

from birbs.config.models import BirbsConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def is_systemd_available() -> bool:
    """Check if systemd is available on the system."""
    try:
        result = subprocess.run(
            ["systemctl", "--version"],
            capture_output=True,
            timeout=2,
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError):
        return False


def get_git_version() -> str:
    """Get the current git branch and commit hash for version logging.

    Returns version in format: branch@SHA[:8]
    """
    try:
        branch_result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        branch = branch_result.stdout.strip() if branch_result.returncode == 0 else "unknown"

        commit_result = subprocess.run(
            ["git", "rev-parse", "--short=8", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        commit = commit_result.stdout.strip() if commit_result.returncode == 0 else "unknown"

        return f"{branch}@{commit}"
    except (subprocess.TimeoutExpired, subprocess.SubprocessError, FileNotFoundError):
        return "unknown"


def is_development() -> bool:
    return os.environ.get("BIRBS_ENV", "production") == "development"


def get_deployment_environment() -> str:
    """Get deployment environment with 'unknown' fallback."""
    if is_docker_environment():
        return "docker"
    elif is_systemd_available():
        return "systemd"
    elif is_development():
        return "development"
    else:
        return "unknown"


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.update(extra_fields)
        return event_dict

    return processor


def _use_json(config: BirbsConfig) -> bool:
    use_json = config.logging.json_logs
    if use_json is None:
        # Auto-detect: JSON for deployed hosts, human-readable for development
        use_json = not is_development() and (is_docker_environment() or is_systemd_available())

    if is_development() and os.environ.get("BIRBS_JSON_LOGS", "false").lower() == "true":
        use_json = True
    return use_json


def _configure_processors(config: BirbsConfig) -> list:
    """Configure structlog processors based on environment."""
    extra_fields = {
        "service": "birbs",
        "version": get_git_version(),
        "deployment": get_deployment_environment(),
        **config.logging.extra_fields,
    }
    if config.site_name:
        extra_fields["site_name"] = config.site_name

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if _use_json(config):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    return processors


def _configure_handlers(config: BirbsConfig) -> None:
    """Route stdlib logging to stderr at the configured level."""
    root_logger = logging.getLogger()
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    # stdout is reserved for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)


def configure_structlog(config: BirbsConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The BirbsConfig instance containing logging settings.
    """
    processors = _configure_processors(config)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, config.logging.level.upper(), logging.INFO)
        ),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configure_handlers(config)

    logger = structlog.get_logger(__name__)
    logger.debug(
        "Structured logging configured",
        log_level=config.logging.level,
        environment=get_deployment_environment(),
        json_output=config.logging.json_logs,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog BoundLogger instance
    """
    return structlog.get_logger(name)
