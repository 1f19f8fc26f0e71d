"""
src/themecheck/models.py
========================
Value types shared by the collector, the engine adapter, the formatter and
the command.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional


class Severity(str, Enum):
    """Theme Check severity levels, in reporting order."""

    REQUIRED = "REQUIRED"
    WARNING = "WARNING"
    RECOMMENDED = "RECOMMENDED"
    INFO = "INFO"

    @classmethod
    def parse(cls, value: str) -> Optional["Severity"]:
        """Case-insensitive lookup; None for anything unrecognised."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.REQUIRED,
    Severity.WARNING,
    Severity.RECOMMENDED,
    Severity.INFO,
)

_KNOWN_LEVELS = frozenset(severity.value for severity in SEVERITY_ORDER)

# Severities that make a run fail.
BLOCKING_SEVERITIES: frozenset[Severity] = frozenset({Severity.REQUIRED, Severity.WARNING})

# Key of the bucket for findings without a recognised severity marker.
UNKNOWN_LEVEL = ""


@dataclass
class ThemeFileSet:
    """Absolute path → content, split the way run_themechecks() expects."""

    php: dict[str, str] = field(default_factory=dict)
    css: dict[str, str] = field(default_factory=dict)
    other: dict[str, str] = field(default_factory=dict)
    unreadable: list[str] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.php) + len(self.css) + len(self.other)

    def paths(self) -> set[str]:
        return set(self.php) | set(self.css) | set(self.other)


@dataclass(frozen=True)
class Finding:
    """One raw engine message and the severity parsed from it."""

    message: str
    level: str = UNKNOWN_LEVEL

    @property
    def severity(self) -> Optional[Severity]:
        return Severity.parse(self.level) if self.level else None


class FindingBuckets:
    """
    Formatted findings grouped by severity.

    Buckets are iterated REQUIRED, WARNING, RECOMMENDED, INFO, then the
    unknown-level bucket (and any unrecognised level) in first-seen order.
    A string is stored at most once per bucket.
    """

    def __init__(self):
        self._buckets: dict[str, list[str]] = {severity.value: [] for severity in SEVERITY_ORDER}

    def add(self, level: str, text: str) -> bool:
        """Append text to the level's bucket. Returns False if it was already there."""
        bucket = self._buckets.setdefault(level, [])
        if text in bucket:
            return False
        bucket.append(text)
        return True

    def get(self, level) -> list[str]:
        key = level.value if isinstance(level, Severity) else level
        return list(self._buckets.get(key, []))

    def count(self, level) -> int:
        return len(self.get(level))

    @property
    def total_errors(self) -> int:
        return sum(self.count(severity) for severity in BLOCKING_SEVERITIES)

    def items(self) -> Iterator[tuple[str, list[str]]]:
        for level, findings in self._buckets.items():
            if level in _KNOWN_LEVELS or findings:
                yield level, list(findings)

    def __len__(self) -> int:
        return sum(len(findings) for findings in self._buckets.values())


@dataclass(frozen=True)
class ThemeMetadata:
    """Theme header fields in the shape of tc_get_theme_data()."""

    name: str = ""
    uri: str = ""
    description: str = ""
    author: str = ""
    author_uri: str = ""
    version: str = ""
    template: str = ""
    status: str = "publish"
    tags: tuple[str, ...] = ()
    title: str = ""
    author_name: str = ""
    license: str = ""
    license_uri: str = ""
    text_domain: str = ""

    def to_engine_dict(self) -> dict:
        """Keys as Theme Check reads them from the global $data."""
        return {
            "Name": self.name,
            "URI": self.uri,
            "Description": self.description,
            "Author": self.author,
            "AuthorURI": self.author_uri,
            "Version": self.version,
            "Template": self.template,
            "Status": self.status,
            "Tags": list(self.tags),
            "Title": self.title or self.name,
            "AuthorName": self.author_name or self.author,
            "License": self.license,
            "LicenseURI": self.license_uri,
            "TextDomain": self.text_domain,
        }


@dataclass(frozen=True)
class ThemeInfo:
    """A theme resolved for scanning."""

    slug: str
    name: str
    root: Path
    metadata: ThemeMetadata
    guest: bool = False


@dataclass(frozen=True)
class EngineResult:
    """Overall verdict and raw messages returned by one engine run."""

    success: bool
    messages: tuple[str, ...] = ()
