"""
src/themecheck/result_formatter.py
==================================
Turns Theme Check's HTML messages into terminal lines.

Theme Check writes its findings for the WordPress admin screen, e.g.

    <span class="tc-lead tc-required">REQUIRED</span>: Could not find
    <strong>comments_template</strong>. See <a href="...">Docs</a>.

Each message is split into its severity and body, the inline markup is
rewritten through a StyleRenderer, entities are decoded, and the result is
stored once per severity bucket.

Design invariant: formatting is a pure function of (message, level,
renderer). No I/O.
"""

import html
import re
from typing import Iterable, Mapping, Optional

from src.themecheck.models import Finding, FindingBuckets, Severity, UNKNOWN_LEVEL

# <span class=...>LEVEL</span>: (greedy on the attribute, as Theme Check matches it)
SEVERITY_MARKER = re.compile(
    r"(<span\sclass=.*>(REQUIRED|WARNING|RECOMMENDED|INFO)</span>\s?:)",
    re.IGNORECASE,
)

_LINK = re.compile(
    r"(<a\s?href\s?=\s?['|\"]([^\"|']*)['|\"]>([^<]*)</a>)",
    re.IGNORECASE,
)

_SPAN_TAGS = ("<span>", '<span class="tc-grep">', "<span class='tc-grep'>", "</span>")
_BREAK_TAGS = ("<br>", "<br />", "<br/>")
_QUOTE_OPEN_TAGS = ("<strong>", "<em>")
_QUOTE_CLOSE_TAGS = ("</strong>", "</em>")
_CODE_OPEN_TAGS = ("<pre class='tc-grep'>", '<pre class="tc-grep">')
_CODE_CLOSE_TAG = "</pre>"

INDENT = "\n  "

ANSI_STYLES: dict[str, str] = {
    "required": "\033[1;31m",
    "warning": "\033[31m",
    "recommended": "\033[1;32m",
    "info": "\033[1;36m",
    "bold": "\033[1m",
    "code": "\033[33m",
    "success": "\033[1;32m",
    "error": "\033[1;31m",
    "reset": "\033[0m",
}

_BULLETS: dict[Severity, tuple[str, str]] = {
    Severity.REQUIRED: ("required", "×"),
    Severity.WARNING: ("warning", "*"),
    Severity.RECOMMENDED: ("recommended", "*"),
    Severity.INFO: ("info", "*"),
}


class StyleRenderer:
    """
    Maps abstract style names to escape sequences.

    Unknown names render as "". StyleRenderer() with no table is the plain,
    colourless renderer.
    """

    def __init__(self, styles: Optional[Mapping[str, str]] = None):
        self.styles = dict(styles or {})

    def __call__(self, name: str) -> str:
        return self.styles.get(name, "")

    def wrap(self, name: str, text: str) -> str:
        """text in the given style, followed by a reset (if styled)."""
        start = self(name)
        if not start:
            return text
        return f"{start}{text}{self('reset')}"


ANSI = StyleRenderer(ANSI_STYLES)
PLAIN = StyleRenderer()


def parse_finding(raw: str) -> Finding:
    """
    Split a raw engine message into severity and body.

    Every severity marker is removed from the body; the level of the first one
    is kept, upper-cased. Messages without a marker get UNKNOWN_LEVEL.
    """
    match = SEVERITY_MARKER.search(raw)
    if match is None:
        return Finding(message=raw, level=UNKNOWN_LEVEL)
    return Finding(message=SEVERITY_MARKER.sub("", raw), level=match.group(2).upper())


def format_finding(message: str, level: str, renderer: StyleRenderer = PLAIN) -> str:
    """
    Render one message body as terminal text.

    Args:
        message:  Message with the severity marker already removed.
        level:    "REQUIRED", "WARNING", "RECOMMENDED", "INFO", or any other
                  string ("" for none).
        renderer: Style table used for colours and emphasis.
    """
    text = _bullet(level, renderer) + message

    for tag in _SPAN_TAGS:
        text = text.replace(tag, "")
    for tag in _BREAK_TAGS:
        text = text.replace(tag, INDENT)

    for tag in _QUOTE_OPEN_TAGS:
        text = text.replace(tag, renderer("bold") + '"')
    for tag in _QUOTE_CLOSE_TAGS:
        text = text.replace(tag, '"' + renderer("reset"))

    for tag in _CODE_OPEN_TAGS:
        text = text.replace(tag, INDENT + renderer("code"))
    text = text.replace(_CODE_CLOSE_TAG, renderer("reset"))

    text = _LINK.sub(
        lambda m: f"{renderer('bold')}{m.group(3)}{renderer('reset')} ({m.group(2)})",
        text,
    )
    text = text.replace("See See:", "See:")

    return html.unescape(text)


def build_buckets(messages: Iterable[str], renderer: StyleRenderer = PLAIN) -> FindingBuckets:
    """
    Format every engine message and group the results by severity.

    Identical formatted lines within one severity are kept once.
    """
    buckets = FindingBuckets()
    for raw in messages:
        finding = parse_finding(raw)
        buckets.add(finding.level, format_finding(finding.message, finding.level, renderer))
    return buckets


def _bullet(level: str, renderer: StyleRenderer) -> str:
    severity = Severity.parse(level) if level else None
    if severity is None:
        return f"* {level}" if level else "* "
    style, mark = _BULLETS[severity]
    return renderer.wrap(style, f"{mark} {severity.value}:")
