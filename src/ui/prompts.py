#!/usr/bin/env python3
"""
Interactive prompts used by the themecheck command.

The command only depends on two callables:

  MenuFn(choices, default, title) -> selected key, or None if cancelled
  ConfirmFn(question)             -> True / False

textual_menu() and textual_confirm() are the terminal implementations; tests
and non-interactive runs pass their own.
"""

from typing import Callable, Mapping, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Button, Footer, OptionList

from src.ui.components.confirm_panel import ConfirmPanel
from src.ui.components.theme_menu import ThemeMenu

MenuFn = Callable[[Mapping[str, str], Optional[str], str], Optional[str]]
ConfirmFn = Callable[[str], bool]


class ThemeMenuApp(App[Optional[str]]):
    """Pick one theme; returns its slug, or None on Escape."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def __init__(self, choices: Mapping[str, str], default: Optional[str] = None, title: str = "Choose a theme"):
        super().__init__()
        self.choices = dict(choices)
        self.default = default
        self.menu_title = title

    def compose(self) -> ComposeResult:
        yield ThemeMenu(self.choices, self.menu_title, active=self.default, id="theme-menu")
        yield Footer()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(event.option.id)

    def action_cancel(self) -> None:
        self.exit(None)


class ConfirmApp(App[bool]):
    """Yes/No question. y / n keys answer directly; Escape means no."""

    BINDINGS = [
        ("y", "answer(True)", "Yes"),
        ("n", "answer(False)", "No"),
        Binding("escape", "answer(False)", "No", priority=True),
    ]

    def __init__(self, question: str):
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        yield ConfirmPanel(self.question, id="confirm")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.exit(event.button.id == "confirm-yes")

    def action_answer(self, value: bool) -> None:
        self.exit(value)


def textual_menu(choices: Mapping[str, str], default: Optional[str], title: str) -> Optional[str]:
    """Show ThemeMenuApp and return the chosen slug (None if cancelled)."""
    if not choices:
        return None
    return ThemeMenuApp(choices, default, title).run()


def textual_confirm(question: str) -> bool:
    """Show ConfirmApp and return the answer."""
    return bool(ConfirmApp(question).run())
