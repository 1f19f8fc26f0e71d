"""
src/themecheck/host.py
======================
WordPress host access through WP-CLI.

Provides the host-side collaborators the command needs:
  - theme lookup, enumeration, and the active theme
  - Theme Check plugin status, install and activation
  - style.css header parsing for themes scanned from a bare directory
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from src.themecheck.models import ThemeInfo, ThemeMetadata
from src.utils.config import get_themecheck_plugin
from src.utils.exceptions import WPCLIError
from src.utils.wp_cli import WPCLI

log = logging.getLogger(__name__)

# WordPress only reads this much of a file when looking for headers.
_HEADER_READ_BYTES = 8192

# style.css header name → ThemeMetadata field
_STYLE_HEADERS: dict[str, str] = {
    "Theme Name": "name",
    "Theme URI": "uri",
    "Description": "description",
    "Author": "author",
    "Author URI": "author_uri",
    "Version": "version",
    "Template": "template",
    "Status": "status",
    "Tags": "tags",
    "License": "license",
    "License URI": "license_uri",
    "Text Domain": "text_domain",
}

_ACTIVE_PLUGIN_STATUSES = frozenset({"active", "active-network", "must-use"})


class WordPressHost:
    """
    Host environment backed by a WPCLI runner.

    Args:
        wp:     Runner for `wp` subcommands.
        plugin: Slug of the Theme Check plugin. Defaults to THEMECHECK_PLUGIN.
    """

    def __init__(self, wp: Optional[WPCLI] = None, plugin: Optional[str] = None):
        self.wp = wp or WPCLI()
        self.plugin = plugin or get_themecheck_plugin()

    # ── Themes ──────────────────────────────────────────────────────────────

    def list_themes(self) -> dict[str, str]:
        """Installed themes as slug → display name, in WP-CLI's order."""
        rows = self._theme_rows()
        return {row["name"]: row.get("title") or row["name"] for row in rows}

    def active_theme(self) -> Optional[str]:
        """Slug of the active theme, or None if WP-CLI reports none."""
        for row in self._theme_rows():
            if row.get("status") == "active":
                return row["name"]
        return None

    def get_theme(self, slug: str) -> Optional[ThemeInfo]:
        """
        Look up an installed theme.

        Returns:
            ThemeInfo, or None if no theme with that slug is installed.

        Raises:
            WPCLIError: If WP-CLI itself fails. `wp theme is-installed` exits 1
                        for a missing theme; any other non-zero status is a failure.
        """
        installed = self.wp.run(["theme", "is-installed", slug], check=False)
        if installed.returncode == 1:
            return None
        if installed.returncode != 0:
            detail = (installed.stderr or installed.stdout or "").strip()
            raise WPCLIError(
                f"`wp theme is-installed {slug}` exited with status {installed.returncode}"
                + (f": {detail}" if detail else "")
            )

        data = self.wp.run_json(["theme", "get", slug, "--format=json"])
        if not isinstance(data, dict):
            raise WPCLIError(f"Unexpected `wp theme get {slug}` output")

        root = Path(data.get("stylesheet_dir") or data.get("template_dir") or "")
        headers = read_style_headers(root / "style.css")

        tags = data.get("tags") or headers.get("tags") or ()
        if isinstance(tags, str):
            tags = _split_tags(tags)

        metadata = ThemeMetadata(
            name=data.get("name") or headers.get("name", slug),
            uri=headers.get("uri", ""),
            description=data.get("description") or headers.get("description", ""),
            author=headers.get("author") or _strip_tags(data.get("author", "")),
            author_uri=headers.get("author_uri", ""),
            version=data.get("version") or headers.get("version", ""),
            template=headers.get("template", ""),
            status=headers.get("status") or "publish",
            tags=tuple(tags),
            title=data.get("title") or data.get("name") or slug,
            author_name=_strip_tags(data.get("author", "")) or headers.get("author", ""),
            license=headers.get("license", ""),
            license_uri=headers.get("license_uri", ""),
            text_domain=headers.get("text_domain", ""),
        )
        return ThemeInfo(slug=slug, name=metadata.name or slug, root=root, metadata=metadata)

    def _theme_rows(self) -> list[dict]:
        rows = self.wp.run_json(["theme", "list", "--fields=name,title,status", "--format=json"])
        if not isinstance(rows, list):
            raise WPCLIError("Unexpected `wp theme list` output")
        return [row for row in rows if isinstance(row, dict) and row.get("name")]

    # ── Theme Check plugin ──────────────────────────────────────────────────

    def plugin_status(self) -> Optional[str]:
        """
        Status of the Theme Check plugin.

        Returns:
            "active", "inactive", or None when not installed.
        """
        rows = self.wp.run_json(["plugin", "list", "--fields=name,status", "--format=json"])
        for row in rows or []:
            if isinstance(row, dict) and row.get("name") == self.plugin:
                return "active" if row.get("status") in _ACTIVE_PLUGIN_STATUSES else "inactive"
        return None

    def install_plugin(self) -> None:
        """Install and activate the Theme Check plugin from wordpress.org."""
        log.info("Installing %s...", self.plugin)
        self.wp.run(["plugin", "install", self.plugin, "--activate"])

    def activate_plugin(self) -> None:
        log.info("Activating %s...", self.plugin)
        self.wp.run(["plugin", "activate", self.plugin])


# ─── style.css headers ────────────────────────────────────────────────────────

def read_style_headers(style_css: Union[str, Path]) -> dict:
    """
    Parse the theme header block of a style.css file.

    Follows WordPress' get_file_data(): only the first 8 KiB are read, each
    header is "Name: value" on its own line, optionally behind comment
    decoration. Tags are split on commas.

    Returns:
        ThemeMetadata field name → value, for the headers present. Empty if
        the file is missing or unreadable.
    """
    path = Path(style_css)
    try:
        with open(path, "rb") as f:
            head = f.read(_HEADER_READ_BYTES).decode("utf-8", errors="replace")
    except OSError as e:
        log.debug(f"No readable style.css at {path}: {e}")
        return {}

    head = head.replace("\r", "\n")
    headers: dict = {}
    for header, field_name in _STYLE_HEADERS.items():
        pattern = re.compile(
            r"^(?:[ \t]*<\?php)?[ \t/*#@]*" + re.escape(header) + r":(.*)$",
            re.IGNORECASE | re.MULTILINE,
        )
        match = pattern.search(head)
        if not match:
            continue
        value = _cleanup_header_comment(match.group(1))
        if not value:
            continue
        headers[field_name] = _split_tags(value) if field_name == "tags" else value
    return headers


def metadata_from_headers(headers: dict, fallback_name: str) -> ThemeMetadata:
    """ThemeMetadata for a theme known only by its style.css."""
    name = headers.get("name") or fallback_name
    return ThemeMetadata(
        name=name,
        uri=headers.get("uri", ""),
        description=headers.get("description", ""),
        author=headers.get("author", ""),
        author_uri=headers.get("author_uri", ""),
        version=headers.get("version", ""),
        template=headers.get("template", ""),
        status=headers.get("status") or "publish",
        tags=tuple(headers.get("tags", ())),
        title=name,
        author_name=headers.get("author", ""),
        license=headers.get("license", ""),
        license_uri=headers.get("license_uri", ""),
        text_domain=headers.get("text_domain", ""),
    )


def _cleanup_header_comment(value: str) -> str:
    return re.sub(r"\s*(?:\*/|\?>).*", "", value).strip()


def _split_tags(value: str) -> list[str]:
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _strip_tags(value: str) -> str:
    return re.sub(r"<[^>]+>", "", value or "").strip()
