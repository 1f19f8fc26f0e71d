#!/usr/bin/env python3
"""
Yes/No question component for the wp-themecheck prompts.
"""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label


class ConfirmPanel(Vertical):
    """Question label with Yes / No buttons."""

    def __init__(self, question: str, **kwargs):
        super().__init__(**kwargs)
        self.question = question

    def compose(self) -> ComposeResult:
        yield Label(self.question, id="confirm-question")
        with Horizontal(id="confirm-buttons"):
            yield Button("Yes", id="confirm-yes", variant="primary")
            yield Button("No", id="confirm-no")
