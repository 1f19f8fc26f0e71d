#!/usr/bin/env python3
"""
Application Configuration Module

Loads wp-themecheck configuration from .env file or environment variables.
Handles the WP-CLI executable, the WordPress install path, subprocess
timeouts and report pacing.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load .env file if it exists, otherwise try .env.example
if Path(".env").exists():
    load_dotenv(".env")
elif Path(".env.example").exists():
    load_dotenv(".env.example")

DEFAULT_WP_CLI_TIMEOUT = 300.0
DEFAULT_LINE_DELAY = 0.05
DEFAULT_THEMECHECK_PLUGIN = "theme-check"


def _strip_quotes(value: str) -> str:
    return value.strip().strip('"').strip("'")


def get_wp_cli_path() -> str:
    """
    Get the WP-CLI executable from .env file or environment variables.

    Returns:
        Path to the `wp` executable. Defaults to "wp" (resolved via PATH).
    """
    path = os.getenv("WP_CLI_PATH", "wp")
    if path and path != "wp":
        path = _strip_quotes(path)
    return path or "wp"


def get_wp_path() -> Optional[str]:
    """
    Get the WordPress install root passed to `wp --path`.

    Returns:
        Directory string if WP_PATH is set, None otherwise (WP-CLI then
        discovers the install from the working directory).
    """
    path = os.getenv("WP_PATH")
    if not path:
        return None
    return _strip_quotes(path) or None


def get_wp_cli_timeout() -> float:
    """
    Get the timeout, in seconds, applied to every `wp` subprocess.

    Returns:
        WP_CLI_TIMEOUT as float. Defaults to 300 seconds; invalid or
        non-positive values fall back to the default.
    """
    return _get_float("WP_CLI_TIMEOUT", DEFAULT_WP_CLI_TIMEOUT, allow_zero=False)


def get_line_delay() -> float:
    """
    Get the pause between printed findings.

    Returns:
        THEMECHECK_LINE_DELAY as float seconds. Defaults to 0.05; 0 disables
        the pause.
    """
    return _get_float("THEMECHECK_LINE_DELAY", DEFAULT_LINE_DELAY, allow_zero=True)


def get_themecheck_plugin() -> str:
    """Get the slug of the Theme Check plugin. Defaults to "theme-check"."""
    return os.getenv("THEMECHECK_PLUGIN", DEFAULT_THEMECHECK_PLUGIN).strip() or DEFAULT_THEMECHECK_PLUGIN


def _get_float(name: str, default: float, allow_zero: bool) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(_strip_quotes(raw))
    except ValueError:
        return default
    if value < 0 or (value == 0 and not allow_zero):
        return default
    return value
