"""
src/themecheck
==============
Theme Check adapter core.

Public surface:
  collect_theme_files   — theme directory → ThemeFileSet (php/css/other)
  build_buckets         — engine messages → FindingBuckets for display
  WPCLIThemeCheckEngine — runs the Theme Check plugin through WP-CLI
  WordPressHost         — theme lookup and plugin management through WP-CLI
"""

from src.themecheck.engine import ThemeCheckEngine, WPCLIThemeCheckEngine
from src.themecheck.file_collector import collect_theme_files, strip_php_comments
from src.themecheck.host import WordPressHost
from src.themecheck.result_formatter import ANSI, PLAIN, StyleRenderer, build_buckets

__all__ = [
    "ANSI",
    "PLAIN",
    "StyleRenderer",
    "ThemeCheckEngine",
    "WPCLIThemeCheckEngine",
    "WordPressHost",
    "build_buckets",
    "collect_theme_files",
    "strip_php_comments",
]
