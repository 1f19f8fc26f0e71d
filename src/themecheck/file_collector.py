"""
src/themecheck/file_collector.py
================================
Collects a theme's files into the three groups run_themechecks() takes.

  php   — *.php files, comments stripped (line count preserved)
  css   — *.css files, raw
  other — everything else, raw; directories map to ""

Dot files and VCS metadata are deliberately included, since several checks
look for them. Any directory named node_modules or tests is skipped at every
depth.

Unreadable files do not abort the scan: they are passed on with empty
content, listed in ThemeFileSet.unreadable, and logged as a warning.
"""

import logging
import os
import re
import stat
from pathlib import Path
from typing import Union

from src.themecheck.models import ThemeFileSet

log = logging.getLogger(__name__)

EXCLUDED_DIRS: frozenset[str] = frozenset({"node_modules", "tests"})

PHP_EXTENSION = "php"
CSS_EXTENSION = "css"


def collect_theme_files(root: Union[str, Path]) -> ThemeFileSet:
    """
    Walk a theme directory and classify every entry.

    Args:
        root: Theme root directory.

    Returns:
        ThemeFileSet keyed by absolute, symlink-resolved paths.

    Raises:
        NotADirectoryError: If root is not an existing directory.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(f"Theme directory does not exist: {root_path}")

    files = ThemeFileSet()

    for dirpath, dirnames, filenames in os.walk(root_path, topdown=True, followlinks=False):
        dirnames[:] = sorted(name for name in dirnames if name not in EXCLUDED_DIRS)

        for name in dirnames:
            files.other[os.path.realpath(os.path.join(dirpath, name))] = ""

        for name in sorted(filenames):
            path = os.path.realpath(os.path.join(dirpath, name))
            extension = file_extension(name)

            if _is_special_file(path):
                log.warning(f"Skipping {path}: not a regular file")
                continue

            try:
                content = _read_text(path)
            except OSError as e:
                log.warning(f"Could not read {path}: {e}")
                files.unreadable.append(path)
                content = ""

            if extension == PHP_EXTENSION:
                files.php[path] = strip_php_comments(content)
            elif extension == CSS_EXTENSION:
                files.css[path] = content
            else:
                files.other[path] = content

    log.debug(
        f"Collected {len(files.php)} php, {len(files.css)} css, "
        f"{len(files.other)} other entries from {root_path}"
    )
    return files


def file_extension(name: str) -> str:
    """Text after the last dot of a file name ("" if none). Case is kept."""
    _, dot, extension = name.rpartition(".")
    return extension if dot else ""


def _is_special_file(path: str) -> bool:
    """True for FIFOs, sockets and devices. Missing paths are left to _read_text."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return not stat.S_ISREG(mode)


def _read_text(path: str) -> str:
    with open(path, "rb") as f:
        return f.read().decode("utf-8", errors="replace")


# ─── PHP comment stripping ────────────────────────────────────────────────────

# Start of a PHP code region inside inline HTML.
_OPEN_TAG = re.compile(r"<\?php\b|<\?=|<\?(?!xml)", re.IGNORECASE)

# Anything inside PHP code that can start a string, a comment, or end the region.
_PHP_SPECIAL = re.compile(r"\?>|//|/\*|#(?!\[)|<<<|['\"`]")

_QUOTED = {
    "'": re.compile(r"'(?:[^'\\]|\\.)*'", re.DOTALL),
    '"': re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL),
    "`": re.compile(r"`(?:[^`\\]|\\.)*`", re.DOTALL),
}

_HEREDOC_START = re.compile(r"<<<[ \t]*(['\"]?)([A-Za-z_][A-Za-z0-9_]*)\1\r?\n")

_LINE_COMMENT_END = re.compile(r"\r|\n|\?>")


def strip_php_comments(code: str) -> str:
    """
    Remove //, # and /* */ comments from PHP source.

    Only PHP code regions are touched; inline HTML is copied as is. Comment
    markers inside quoted strings, heredocs and nowdocs are kept. Newlines that
    were part of a removed comment are kept so line numbers do not shift.
    """
    out: list[str] = []
    pos = 0
    length = len(code)

    while pos < length:
        # Inline HTML up to the next open tag.
        tag = _OPEN_TAG.search(code, pos)
        if tag is None:
            out.append(code[pos:])
            break
        out.append(code[pos:tag.end()])
        pos = _strip_php_region(code, tag.end(), out)

    return "".join(out)


def _strip_php_region(code: str, pos: int, out: list[str]) -> int:
    """Copy one PHP region into out, minus comments. Returns the position after it."""
    length = len(code)

    while pos < length:
        match = _PHP_SPECIAL.search(code, pos)
        if match is None:
            out.append(code[pos:])
            return length

        out.append(code[pos:match.start()])
        token = match.group()
        pos = match.start()

        if token == "?>":
            out.append(token)
            return match.end()

        if token in _QUOTED:
            string = _QUOTED[token].match(code, pos)
            end = string.end() if string else length
            out.append(code[pos:end])
            pos = end

        elif token == "<<<":
            pos = _copy_heredoc(code, pos, out)

        elif token == "/*":
            close = code.find("*/", pos + 2)
            end = length if close == -1 else close + 2
            out.append(_newlines_only(code[pos:end]))
            pos = end

        else:
            # // or #, up to the end of the line or the closing tag.
            stop = _LINE_COMMENT_END.search(code, match.end())
            pos = length if stop is None else stop.start()

    return pos


def _copy_heredoc(code: str, pos: int, out: list[str]) -> int:
    start = _HEREDOC_START.match(code, pos)
    if start is None:
        out.append("<<<")
        return pos + 3

    label = re.escape(start.group(2))
    closing = re.compile(rf"^[ \t]*{label}(?![A-Za-z0-9_])", re.MULTILINE)
    end_match = closing.search(code, start.end())
    end = len(code) if end_match is None else end_match.end()
    out.append(code[pos:end])
    return end


def _newlines_only(comment: str) -> str:
    return "".join(ch for ch in comment if ch in "\r\n")
