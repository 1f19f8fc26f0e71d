"""
src/utils/wp_cli.py
===================
Thin subprocess wrapper around the `wp` command (WP-CLI).

Every interaction with WordPress goes through WPCLI.run(): theme lookups,
plugin management, and the Theme Check run itself. Output is captured as
text; failures become WPCLIError with stderr attached.
"""

import json
import logging
import subprocess
from typing import Any, Optional, Sequence

from src.utils.config import get_wp_cli_path, get_wp_cli_timeout, get_wp_path
from src.utils.exceptions import WPCLIError

log = logging.getLogger(__name__)


class WPCLI:
    """
    Runs `wp` subcommands against one WordPress install.

    Args:
        executable: WP-CLI executable. Defaults to WP_CLI_PATH.
        wp_path:    WordPress root passed as --path. Defaults to WP_PATH.
        timeout:    Seconds before a subprocess is killed. Defaults to WP_CLI_TIMEOUT.
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        wp_path: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.executable = executable or get_wp_cli_path()
        self.wp_path = wp_path if wp_path is not None else get_wp_path()
        self.timeout = timeout if timeout is not None else get_wp_cli_timeout()

    def command(self, args: Sequence[str]) -> list[str]:
        """Build the full argv for a `wp` subcommand."""
        cmd = [self.executable, *args]
        if self.wp_path:
            cmd.append(f"--path={self.wp_path}")
        return cmd

    def run(
        self,
        args: Sequence[str],
        stdin: Optional[str] = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """
        Run a `wp` subcommand and capture its output.

        Args:
            args:  Subcommand and arguments, e.g. ["theme", "list"].
            stdin: Text fed to the process' standard input.
            check: Raise WPCLIError on a non-zero exit status.

        Returns:
            The completed process (stdout/stderr as text).

        Raises:
            WPCLIError: If the executable is missing, the call times out, or
                        (with check=True) exits non-zero.
        """
        cmd = self.command(args)
        log.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise WPCLIError(f"WP-CLI executable not found: {self.executable}", cause=e) from e
        except subprocess.TimeoutExpired as e:
            raise WPCLIError(
                f"`wp {' '.join(args)}` timed out after {self.timeout:g}s", cause=e
            ) from e

        if check and result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise WPCLIError(
                f"`wp {' '.join(args)}` exited with status {result.returncode}"
                + (f": {detail}" if detail else "")
            )
        return result

    def run_json(self, args: Sequence[str]) -> Any:
        """
        Run a subcommand that prints JSON (callers pass --format=json) and decode it.

        Raises:
            WPCLIError: On process failure or undecodable output.
        """
        result = self.run(args)
        try:
            return json.loads(result.stdout or "null")
        except json.JSONDecodeError as e:
            raise WPCLIError(f"`wp {' '.join(args)}` returned invalid JSON", cause=e) from e
