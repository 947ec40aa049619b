#!/usr/bin/env python3

import os
from typing import Any, Dict, List, Mapping, Optional

from critical_review.errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    """Read a variable, falling back to the INPUT_ form GitHub Actions uses for action inputs."""
    value = environ.get(name) or environ.get(f"INPUT_{name}")
    return value if value else default


def parse_exclude_patterns(raw: Optional[str]) -> List[str]:
    """Split a comma-separated list of glob patterns."""
    if not raw or not raw.strip():
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def load_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Loads configuration from environment variables.

    Args:
        environ: Variables to read, defaults to os.environ

    Returns:
        Dict containing configuration values

    Raises:
        ConfigurationError: If a numeric setting or the log level is invalid
    """
    if environ is None:
        environ = os.environ

    max_workers_raw = environ.get("INPUT_MAX_WORKERS") or "1"
    try:
        max_workers = int(max_workers_raw)
    except ValueError as e:
        raise ConfigurationError(f"INPUT_MAX_WORKERS must be an integer, got {max_workers_raw!r}") from e
    if max_workers < 1:
        raise ConfigurationError(f"INPUT_MAX_WORKERS must be at least 1, got {max_workers}")

    timeout_raw = environ.get("INPUT_REQUEST_TIMEOUT") or "60"
    try:
        request_timeout = float(timeout_raw)
    except ValueError as e:
        raise ConfigurationError(f"INPUT_REQUEST_TIMEOUT must be a number, got {timeout_raw!r}") from e
    if request_timeout <= 0:
        raise ConfigurationError(f"INPUT_REQUEST_TIMEOUT must be positive, got {request_timeout}")

    log_level = (environ.get("INPUT_LOG_LEVEL") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"INPUT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    config = {
        # GitHub configuration
        "github_token": _get(environ, "GITHUB_TOKEN"),
        "github_api_url": environ.get("GITHUB_API_URL") or "https://api.github.com",
        "github_event_path": environ.get("GITHUB_EVENT_PATH"),
        "github_event_name": environ.get("GITHUB_EVENT_NAME"),

        # General configuration
        "exclude_patterns": parse_exclude_patterns(environ.get("INPUT_EXCLUDE")),
        "title_prefix": environ.get("INPUT_TITLE_PREFIX", ""),
        "review_body": environ.get("INPUT_REVIEW_BODY") or "Code Reviewer Comments",
        "max_workers": max_workers,
        "request_timeout": request_timeout,
        "log_level": log_level,

        # OpenAI configuration
        "openai_api_key": _get(environ, "OPENAI_API_KEY"),
        "openai_api_model": _get(environ, "OPENAI_API_MODEL", "gpt-4"),

        # Azure OpenAI configuration
        "azure_openai_endpoint": environ.get("AZURE_OPENAI_ENDPOINT"),
        "azure_openai_key": environ.get("AZURE_OPENAI_KEY"),
        "azure_openai_deployment": environ.get("AZURE_OPENAI_DEPLOYMENT"),
        "azure_openai_api_version": environ.get("AZURE_OPENAI_API_VERSION"),
    }

    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Checks that every required setting is present.

    Raises:
        ConfigurationError: Listing the missing environment variables
    """
    required = {"GITHUB_TOKEN": "github_token", "GITHUB_EVENT_PATH": "github_event_path"}
    if config.get("azure_openai_endpoint"):
        required.update({
            "AZURE_OPENAI_KEY": "azure_openai_key",
            "AZURE_OPENAI_DEPLOYMENT": "azure_openai_deployment",
            "AZURE_OPENAI_API_VERSION": "azure_openai_api_version",
        })
    else:
        required["OPENAI_API_KEY"] = "openai_api_key"

    missing_vars = [var for var, key in required.items() if not config.get(key)]
    if missing_vars:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing_vars)}")
