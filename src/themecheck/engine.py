"""
src/themecheck/engine.py
========================
Bridge to the Theme Check rule engine.

The engine is the Theme Check WordPress plugin; this module never
reimplements a rule. WPCLIThemeCheckEngine sends the collected file groups
and the theme metadata as JSON to php/run_themechecks.php, executed with
`wp eval-file`, and reads back the overall verdict plus every message the
checks reported. Findings come back as the return value; nothing is left in
shared state.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from src.themecheck.models import EngineResult, ThemeFileSet, ThemeMetadata
from src.utils.config import get_themecheck_plugin
from src.utils.exceptions import EngineExecutionError
from src.utils.wp_cli import WPCLI

log = logging.getLogger(__name__)

BOOTSTRAP_PATH = Path(__file__).parent / "php" / "run_themechecks.php"

# Printed by the bootstrap right before the JSON result.
RESULT_MARKER = "@@WP_THEMECHECK_RESULT@@"


class ThemeCheckEngine(Protocol):
    """Runs the compliance checks over one theme's files."""

    def run(self, files: ThemeFileSet, metadata: ThemeMetadata, theme_slug: str) -> EngineResult:
        ...


class WPCLIThemeCheckEngine:
    """
    ThemeCheckEngine executed inside WordPress via WP-CLI.

    Args:
        wp:        Runner for `wp` subcommands.
        plugin:    Theme Check plugin slug (its directory under WP_PLUGIN_DIR).
        bootstrap: PHP file handed to `wp eval-file`.
    """

    def __init__(
        self,
        wp: Optional[WPCLI] = None,
        plugin: Optional[str] = None,
        bootstrap: Path = BOOTSTRAP_PATH,
    ):
        self.wp = wp or WPCLI()
        self.plugin = plugin or get_themecheck_plugin()
        self.bootstrap = bootstrap

    def run(self, files: ThemeFileSet, metadata: ThemeMetadata, theme_slug: str) -> EngineResult:
        """
        Run every Theme Check check over the file set.

        Returns:
            EngineResult with the engine's pass/fail verdict and raw messages.

        Raises:
            WPCLIError:           If `wp eval-file` fails.
            EngineExecutionError: If the bootstrap output holds no valid result.
        """
        payload = build_payload(files, metadata, theme_slug, self.plugin)
        log.debug(f"Sending {len(files)} entries to Theme Check for {theme_slug}")
        result = self.wp.run(["eval-file", str(self.bootstrap)], stdin=payload)
        return parse_engine_output(result.stdout)


def build_payload(files: ThemeFileSet, metadata: ThemeMetadata, theme_slug: str, plugin: str) -> str:
    """JSON document read by the PHP bootstrap from STDIN."""
    return json.dumps(
        {
            "plugin": plugin,
            "themename": theme_slug,
            "data": metadata.to_engine_dict(),
            "php": files.php,
            "css": files.css,
            "other": files.other,
        },
        ensure_ascii=False,
    )


def parse_engine_output(stdout: str) -> EngineResult:
    """
    Extract the result document printed after RESULT_MARKER.

    Anything WordPress or a plugin printed before the marker is ignored.

    Raises:
        EngineExecutionError: If the marker is missing or the document is malformed.
    """
    _, marker, document = (stdout or "").rpartition(RESULT_MARKER)
    if not marker:
        raise EngineExecutionError("Theme Check produced no result (is the plugin loaded correctly?)")

    try:
        data = json.loads(document.strip().splitlines()[0] if document.strip() else "")
    except json.JSONDecodeError as e:
        raise EngineExecutionError("Theme Check returned a malformed result", cause=e) from e

    if not isinstance(data, dict) or "success" not in data:
        raise EngineExecutionError("Theme Check result is missing the success flag")

    errors = data.get("errors") or []
    if not isinstance(errors, list):
        raise EngineExecutionError("Theme Check result has a malformed error list")

    return EngineResult(success=bool(data["success"]), messages=tuple(str(e) for e in errors))
