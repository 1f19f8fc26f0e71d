#!/usr/bin/env python3
"""
Configuration validation for wp-themecheck.

Checks that the WP-CLI executable can be found and that the optional
WordPress path points at a directory, before any subprocess is started.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from src.utils.config import get_wp_cli_path, get_wp_path
from src.utils.exceptions import ThemecheckConfigError


def find_wp_cli_executable(wp_cli_path: Optional[str] = None) -> Optional[str]:
    """
    Resolve the WP-CLI executable.

    Args:
        wp_cli_path: Explicit path or command name. Defaults to the configured
                     WP_CLI_PATH.

    Returns:
        Absolute path to the executable, or None if it cannot be found.
    """
    candidate = wp_cli_path or get_wp_cli_path()

    if os.sep in candidate or (os.altsep and os.altsep in candidate):
        path = Path(candidate).expanduser()
        if path.is_file():
            return str(path.resolve())
        if os.name == "nt":
            for suffix in (".bat", ".cmd"):
                with_suffix = path.with_name(path.name + suffix)
                if with_suffix.is_file():
                    return str(with_suffix.resolve())
        return None

    return shutil.which(candidate)


def validate_wp_cli_path(wp_cli_path: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate the WP-CLI executable.

    Returns:
        (True, None) if found, otherwise (False, error message).
    """
    candidate = wp_cli_path or get_wp_cli_path()
    if find_wp_cli_executable(candidate):
        return True, None
    return False, (
        f"WP-CLI executable not found: {candidate}\n"
        "Install WP-CLI from https://wp-cli.org/ and either add `wp` to your PATH "
        "or set WP_CLI_PATH in your .env file."
    )


def validate_wp_path(wp_path: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Validate the WordPress install path, if one is configured.

    Returns:
        (True, None) if unset or an existing directory, otherwise (False, error message).
    """
    path = wp_path if wp_path is not None else get_wp_path()
    if not path:
        return True, None
    if Path(path).expanduser().is_dir():
        return True, None
    return False, f"WordPress path does not exist or is not a directory: {path}"


def validate_all_config(
    wp_cli_path: Optional[str] = None,
    wp_path: Optional[str] = None,
) -> Tuple[bool, List[str]]:
    """
    Run every configuration check.

    Returns:
        (is_valid, list of error messages).
    """
    errors: List[str] = []
    for is_valid, error in (validate_wp_cli_path(wp_cli_path), validate_wp_path(wp_path)):
        if not is_valid and error:
            errors.append(error)
    return not errors, errors


def validate_and_exit_on_error(wp_cli_path: Optional[str] = None, wp_path: Optional[str] = None) -> None:
    """
    Validate configuration and raise on the first problem.

    Raises:
        ThemecheckConfigError: If any check fails. The message joins all errors.
    """
    is_valid, errors = validate_all_config(wp_cli_path, wp_path)
    if not is_valid:
        raise ThemecheckConfigError("\n".join(errors))
