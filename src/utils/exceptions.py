"""
Exception hierarchy for wp-themecheck.

Every error carries an optional ``cause`` so the CLI can log the underlying
failure next to the user-facing message.
"""

from typing import Optional


class ThemecheckError(Exception):
    """Base class for all wp-themecheck errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ThemecheckConfigError(ThemecheckError):
    """Configuration is missing or invalid (e.g. WP-CLI not found)."""


class WPCLIError(ThemecheckError):
    """A `wp` subprocess failed, timed out, or produced unusable output."""


class EngineMissingError(ThemecheckError):
    """The Theme Check plugin is not installed or not active."""

    def __init__(self, message: str, installed: bool = False, cause: Optional[BaseException] = None):
        super().__init__(message, cause)
        self.installed = installed


class EngineExecutionError(ThemecheckError):
    """The Theme Check run did not produce a readable result."""


class ThemeNotFoundError(ThemecheckError):
    """The requested theme is neither installed nor an existing directory."""

    def __init__(self, identifier: str, cause: Optional[BaseException] = None):
        super().__init__(f'Unable find theme with name "{identifier}"', cause)
        self.identifier = identifier
