#!/usr/bin/env python3
"""
wp-themecheck command.

Runs the Theme Check plugin against one theme from the terminal:
1. Preflight: the Theme Check plugin is installed and active
2. Resolve the theme to check
3. Collect the theme's files
4. Run Theme Check
5. Format its findings
6. Report, and exit with the number of blocking findings
"""

import argparse
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TextIO

from src.themecheck.engine import ThemeCheckEngine, WPCLIThemeCheckEngine
from src.themecheck.file_collector import collect_theme_files
from src.themecheck.host import WordPressHost, metadata_from_headers, read_style_headers
from src.themecheck.models import (
    EngineResult,
    FindingBuckets,
    Severity,
    ThemeFileSet,
    ThemeInfo,
)
from src.themecheck.result_formatter import ANSI, PLAIN, StyleRenderer, build_buckets
from src.ui.prompts import ConfirmFn, MenuFn, textual_confirm, textual_menu
from src.utils.config import get_line_delay
from src.utils.config_validator import validate_all_config, validate_and_exit_on_error
from src.utils.exceptions import (
    EngineExecutionError,
    EngineMissingError,
    ThemecheckConfigError,
    ThemecheckError,
    ThemeNotFoundError,
    WPCLIError,
)
from src.utils.logger import get_logger, setup_logging
from src.utils.wp_cli import WPCLI

logger = get_logger(__name__)

# Exit statuses are truncated to 8 bits by the OS.
MAX_EXIT_CODE = 255


@dataclass
class ScanOptions:
    """Command-line options of one invocation."""

    theme: Optional[str] = None
    skip_info: bool = False
    skip_recommended: bool = False
    interactive: bool = True


@dataclass
class ScanOutcome:
    """Terminal state of one invocation."""

    exit_code: int
    message: str
    buckets: Optional[FindingBuckets] = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0


def _log_exception_cause(e: Exception) -> None:
    """
    Log the cause of an exception if available and not already included in the exception message.
    Checks both e.cause (if set via constructor) and e.__cause__ (if set via 'from e').
    """
    cause = getattr(e, 'cause', None) or getattr(e, '__cause__', None)
    if cause:
        cause_str = str(cause)
        error_str = str(e)
        if cause_str not in error_str:
            logger.error("   Cause: %s", cause)


class ThemecheckCommand:
    """
    Orchestrates one Theme Check run.

    Args:
        host:       WordPress host (themes, plugin management).
        engine:     Theme Check engine.
        menu:       Theme selection prompt, used in interactive mode.
        confirm:    Yes/No prompt, used in interactive mode.
        renderer:   Style table for the report.
        out:        Stream for the report and success message.
        err:        Stream for the failure summary.
        line_delay: Pause after each printed finding, in seconds.
        sleep:      Function used for that pause.
    """

    def __init__(
        self,
        host: WordPressHost,
        engine: ThemeCheckEngine,
        menu: Optional[MenuFn] = None,
        confirm: Optional[ConfirmFn] = None,
        renderer: StyleRenderer = PLAIN,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        line_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.host = host
        self.engine = engine
        self.menu = menu or textual_menu
        self.confirm = confirm or textual_confirm
        self.renderer = renderer
        self.out = out or sys.stdout
        self.err = err or sys.stderr
        self.line_delay = get_line_delay() if line_delay is None else line_delay
        self.sleep = sleep

    def run(self, options: ScanOptions) -> ScanOutcome:
        """
        Run all steps.

        Raises:
            EngineMissingError: Theme Check unavailable and not (or not allowed to be) installed.
            ThemeNotFoundError: The theme could not be resolved.
            WPCLIError, EngineExecutionError: WordPress or Theme Check failed.
        """
        stopped = self.step1_preflight(options.interactive)
        if stopped is not None:
            return stopped

        theme = self.step2_resolve_theme(options)

        self._line("\n")
        self._line(f"| Checking {theme.name}...")
        self._line("\n")

        files = self.step3_collect_files(theme)
        result = self.step4_run_engine(theme, files)
        buckets = self.step5_format_results(result)
        return self.step6_report(theme, result, buckets, options)

    # ── Steps ───────────────────────────────────────────────────────────────

    def step1_preflight(self, interactive: bool) -> Optional[ScanOutcome]:
        """
        Make sure the Theme Check plugin is usable.

        Returns:
            None to continue, or the outcome to stop with after an
            interactive install/activation.
        """
        plugin = self.host.plugin
        status = self.host.plugin_status()
        if status == "active":
            return None

        installed = status is not None
        if not interactive:
            if installed:
                raise EngineMissingError(
                    f"Please activate the Theme Check plugin: wp plugin activate {plugin}",
                    installed=True,
                )
            raise EngineMissingError(
                f"Please install and activate the Theme Check plugin: wp plugin install {plugin} --activate",
                installed=False,
            )

        if installed:
            question = "The Theme Check plugin is installed but not active. Activate it now?"
        else:
            question = "The Theme Check plugin is not installed. Install and activate it now?"

        if not self.confirm(question):
            raise EngineMissingError("Aborted: the Theme Check plugin is required.", installed=installed)

        if installed:
            self.host.activate_plugin()
        else:
            self.host.install_plugin()

        message = "Theme Check plugin is ready. Run the command again to check a theme."
        self._line(f"{self.renderer.wrap('success', 'Success:')} {message}")
        return ScanOutcome(exit_code=0, message=message)

    def step2_resolve_theme(self, options: ScanOptions) -> ThemeInfo:
        """
        Pick the theme: --theme, else the menu (interactive) or the active theme.

        An identifier that is not an installed theme but names an existing
        directory is checked as a guest theme.

        Raises:
            ThemeNotFoundError: If neither lookup succeeds.
        """
        identifier = options.theme
        if not identifier:
            active = self.host.active_theme()
            if options.interactive:
                identifier = self.menu(self.host.list_themes(), active, "Choose a theme")
                if identifier is None:
                    raise ThemecheckError("No theme selected.")
            else:
                identifier = active

        if not identifier:
            raise ThemeNotFoundError("")

        theme = self.host.get_theme(identifier)
        if theme is not None:
            return theme

        guest_path = Path(identifier).expanduser()
        if guest_path.is_dir():
            root = guest_path.resolve()
            metadata = metadata_from_headers(read_style_headers(root / "style.css"), root.name)
            logger.debug("Checking guest theme directory %s", root)
            return ThemeInfo(slug=root.name, name=metadata.name, root=root, metadata=metadata, guest=True)

        raise ThemeNotFoundError(identifier)

    def step3_collect_files(self, theme: ThemeInfo) -> ThemeFileSet:
        files = collect_theme_files(theme.root)
        if files.unreadable:
            logger.warning(
                "%d file(s) could not be read and were checked as empty.", len(files.unreadable)
            )
        return files

    def step4_run_engine(self, theme: ThemeInfo, files: ThemeFileSet) -> EngineResult:
        return self.engine.run(files, theme.metadata, theme.slug)

    def step5_format_results(self, result: EngineResult) -> FindingBuckets:
        return build_buckets(result.messages, self.renderer)

    def step6_report(
        self,
        theme: ThemeInfo,
        result: EngineResult,
        buckets: FindingBuckets,
        options: ScanOptions,
    ) -> ScanOutcome:
        """
        Print the findings and the final verdict.

        Exit code is 0 on success, otherwise REQUIRED + WARNING count, clamped to
        1..MAX_EXIT_CODE. The message always carries the real count.
        """
        for level, findings in buckets.items():
            if options.skip_info and level == Severity.INFO.value:
                continue
            if options.skip_recommended and level == Severity.RECOMMENDED.value:
                continue

            for finding in findings:
                self._line(finding + "\n")
                if self.line_delay:
                    self.sleep(self.line_delay)

        total_errors = buckets.total_errors

        if result.success:
            message = f"Congratulations! {theme.name} passed the tests!"
            self._line(f"{self.renderer.wrap('success', 'Success:')} {message}")
            return ScanOutcome(exit_code=0, message=message, buckets=buckets)

        message = f"{total_errors} error(s) found for {theme.name}!"
        print(f"{self.renderer.wrap('error', 'Error:')} {message}", file=self.err)
        return ScanOutcome(exit_code=min(max(total_errors, 1), MAX_EXIT_CODE), message=message, buckets=buckets)

    def _line(self, text: str) -> None:
        print(text, file=self.out)


# ─── CLI ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wp-themecheck",
        description="Run the WordPress Theme Check plugin against a theme from the command line",
    )
    parser.add_argument("--theme", metavar="THEME", help="Theme slug (or theme directory) to check")
    parser.add_argument("--skip-info", action="store_true", help="Suppress INFO")
    parser.add_argument("--skip-recommended", action="store_true", help="Suppress RECOMMENDED")
    parser.add_argument(
        "--interactive",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Prompt for the theme and for installing Theme Check (default: on when attached to a terminal)",
    )
    parser.add_argument("--path", metavar="PATH", help="WordPress install root (overrides WP_PATH)")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    return parser


def build_command(args: argparse.Namespace) -> ThemecheckCommand:
    """Wire the command to WP-CLI for the given options."""
    wp = WPCLI(wp_path=args.path)
    colored = not args.no_color and sys.stdout.isatty()
    return ThemecheckCommand(
        host=WordPressHost(wp),
        engine=WPCLIThemeCheckEngine(wp),
        renderer=ANSI if colored else PLAIN,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """
    CLI entry point.

    Expected usage:
        wp-themecheck --theme=twentytwentyfour
        wp-themecheck --theme=/path/to/theme --skip-info --no-interactive

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        validate_and_exit_on_error(wp_path=args.path)
    except ThemecheckConfigError as e:
        logger.error("Configuration validation failed:\n%s", e)
        return 1

    options = ScanOptions(
        theme=args.theme,
        skip_info=args.skip_info,
        skip_recommended=args.skip_recommended,
        interactive=args.interactive and sys.stdin.isatty(),
    )

    try:
        return build_command(args).run(options).exit_code
    except EngineMissingError as e:
        logger.error("%s", e)
        return 1
    except ThemeNotFoundError as e:
        logger.error("%s", e)
        return 1
    except WPCLIError as e:
        logger.error("%s", e)
        _log_exception_cause(e)
        logger.error("   Please check your WP-CLI installation and WordPress path.")
        return 1
    except EngineExecutionError as e:
        logger.error("%s", e)
        _log_exception_cause(e)
        logger.error("   Please check that the Theme Check plugin is up to date.")
        return 1
    except ThemecheckError as e:
        logger.error("%s", e)
        _log_exception_cause(e)
        return 1


def main_validate() -> int:
    """
    CLI entry point to validate configuration.

    Expected usage: wp-themecheck-validate
    """
    setup_logging()
    is_valid, errors = validate_all_config()

    if is_valid:
        logger.info("[+] All configurations are valid!")
        return 0
    for error in errors:
        logger.error(error)
    return 1


if __name__ == '__main__':
    sys.exit(main())
