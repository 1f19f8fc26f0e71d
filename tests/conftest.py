import subprocess
from pathlib import Path

import pytest

from src.themecheck.models import EngineResult, ThemeInfo, ThemeMetadata

STYLE_CSS = """/*
Theme Name: Sample Theme
Theme URI: https://example.com/sample
Author: Jane Doe
Author URI: https://example.com
Description: A theme used in tests.
Version: 1.2.0
License: GPLv2 or later
License URI: https://www.gnu.org/licenses/gpl-2.0.html
Text Domain: sample
Tags: blog, one-column, custom-menu
*/
body { color: #000; } /* css comments stay */
"""


def required(text):
    return f'<span class="tc-lead tc-required">REQUIRED</span>: {text}'


def warning(text):
    return f'<span class="tc-lead tc-warning">WARNING</span>: {text}'


def recommended(text):
    return f'<span class="tc-lead tc-recommended">RECOMMENDED</span>: {text}'


def info(text):
    return f'<span class="tc-lead tc-info">INFO</span>: {text}'


@pytest.fixture
def theme_dir(tmp_path):
    """A small theme tree with dot files and excluded folders."""
    root = tmp_path / "sample"
    files = {
        "style.css": STYLE_CSS,
        "index.php": "<?php\n// main template\nget_header(); /* header */\n$url = 'http://example.com'; # done\n",
        "functions.php": "<?php\nfunction sample_setup() {}\n",
        "readme.txt": "=== Sample ===\n",
        ".gitignore": "node_modules\n",
        ".git/HEAD": "ref: refs/heads/main\n",
        "js/app.js": "console.log('hi');\n",
        "inc/template-tags.php": "<?php\n/** Doc */\nfunction sample_posted_on() {}\n",
        "node_modules/pkg/index.php": "<?php eval($x);\n",
        "tests/test-sample.php": "<?php eval($x);\n",
        "inc/tests/helper.php": "<?php eval($x);\n",
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / "images").mkdir()
    return root


def make_theme(root: Path, slug="sample", name="Sample Theme") -> ThemeInfo:
    return ThemeInfo(slug=slug, name=name, root=root, metadata=ThemeMetadata(name=name, version="1.2.0"))


class FakeHost:
    plugin = "theme-check"

    def __init__(self, themes=None, active=None, status="active"):
        self.themes = dict(themes or {})
        self.active = active
        self.status = status
        self.calls = []

    def plugin_status(self):
        return self.status

    def install_plugin(self):
        self.calls.append("install")
        self.status = "active"

    def activate_plugin(self):
        self.calls.append("activate")
        self.status = "active"

    def list_themes(self):
        return {slug: theme.name for slug, theme in self.themes.items()}

    def active_theme(self):
        return self.active

    def get_theme(self, slug):
        return self.themes.get(slug)


class FakeEngine:
    def __init__(self, success=True, messages=(), rule=None):
        self.success = success
        self.messages = tuple(messages)
        self.rule = rule
        self.calls = []

    def run(self, files, metadata, theme_slug):
        self.calls.append((files, metadata, theme_slug))
        if self.rule is not None:
            messages = tuple(self.rule(files))
            return EngineResult(success=not messages, messages=messages)
        return EngineResult(success=self.success, messages=self.messages)


class FakeWP:
    """Stands in for WPCLI: canned stdout / JSON keyed by the leading arguments."""

    def __init__(self, outputs=None, json_outputs=None, returncodes=None):
        self.outputs = dict(outputs or {})
        self.json_outputs = dict(json_outputs or {})
        self.returncodes = dict(returncodes or {})
        self.calls = []

    def _key(self, args):
        return tuple(args[:2])

    def run(self, args, stdin=None, check=True):
        self.calls.append((list(args), stdin))
        key = self._key(args)
        return subprocess.CompletedProcess(
            list(args), self.returncodes.get(key, 0), stdout=self.outputs.get(key, ""), stderr=""
        )

    def run_json(self, args):
        self.calls.append((list(args), None))
        return self.json_outputs[self._key(args)]
