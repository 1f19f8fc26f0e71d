#!/usr/bin/env python3
"""
Theme selection component for the wp-themecheck prompts.
"""

from typing import Mapping, Optional

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Label, OptionList
from textual.widgets.option_list import Option


class ThemeOptionList(OptionList):
    """Option list whose cursor starts on a given option."""

    def __init__(self, *options: Option, initial: Optional[int] = None, **kwargs):
        super().__init__(*options, **kwargs)
        self.initial = initial

    def on_mount(self) -> None:
        if self.initial is not None:
            self.highlighted = self.initial


class ThemeMenu(Vertical):
    """
    Title plus a list of installed themes, one option per slug.

    The active theme is marked and pre-selected.
    """

    def __init__(self, choices: Mapping[str, str], title: str, active: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.choices = dict(choices)
        self.title_text = title
        self.active = active

    def compose(self) -> ComposeResult:
        """Compose the menu: a title label above the option list."""
        slugs = list(self.choices)
        yield Label(self.title_text, id="theme-menu-title")
        yield ThemeOptionList(
            *[
                Option(f"{name} (active)" if slug == self.active else name, id=slug)
                for slug, name in self.choices.items()
            ],
            initial=slugs.index(self.active) if self.active in self.choices else None,
            id="theme-menu-options",
        )
