"""Interactive single-choice selection prompt built on prompt_toolkit."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from prompt_toolkit.application import Application
from prompt_toolkit.formatted_text import (
    AnyFormattedText,
    FormattedText,
    StyleAndTextTuples,
    fragment_list_to_text,
    to_formatted_text,
)
from prompt_toolkit.key_binding import KeyBindings, KeyPressEvent
from prompt_toolkit.layout import Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from ci_navigator.terminal import TerminalContext

PROMPT_STYLE = Style.from_dict(
    {
        "question-mark": "ansigreen bold",
        "answer-mark": "ansigreen",
        "message": "bold",
        "pointer": "ansicyan bold",
        "highlight": "bg:ansiwhite fg:ansiblack",
        "hint": "ansibrightblack",
    }
)

POINTER = "❯ "


class SelectionCancelled(Exception):
    """Raised when the operator aborts a selection prompt."""


@dataclass(frozen=True, kw_only=True)
class Choice[T]:
    """One selectable entry: what is displayed and what is returned."""

    title: AnyFormattedText
    value: T


class Prompter(Protocol):
    """Something that can ask the operator to pick one of several choices."""

    async def select[T](self, message: str, choices: Sequence[Choice[T]]) -> T:
        """Return the value of the selected choice.

        Raises:
            SelectionCancelled: If the operator aborts the prompt

        """
        ...


class SelectPrompt[T]:
    """State and rendering of a single-choice list.

    The list does not wrap around at either end and scrolls by keeping the
    current entry inside a window of page_size rows.
    """

    def __init__(
        self, message: str, choices: Sequence[Choice[T]], *, page_size: int
    ) -> None:
        if not choices:
            raise ValueError("At least one choice is required")
        self.message = message
        self.choices = list(choices)
        self.page_size = max(page_size, 1)
        self.index = 0
        self.offset = 0

    @property
    def selected(self) -> Choice[T]:
        return self.choices[self.index]

    def move(self, delta: int) -> None:
        self.index = min(max(self.index + delta, 0), len(self.choices) - 1)
        if self.index < self.offset:
            self.offset = self.index
        elif self.index >= self.offset + self.page_size:
            self.offset = self.index - self.page_size + 1

    def render(self) -> StyleAndTextTuples:
        lines: list[StyleAndTextTuples] = [
            [("class:question-mark", "? "), ("class:message", self.message)]
        ]

        visible = self.choices[self.offset : self.offset + self.page_size]
        for position, choice in enumerate(visible, start=self.offset):
            title = to_formatted_text(choice.title)
            if position == self.index:
                lines.append(
                    [
                        ("class:pointer", POINTER),
                        ("class:highlight", fragment_list_to_text(title)),
                    ]
                )
            else:
                lines.append([("", " " * len(POINTER)), *title])

        if len(self.choices) > self.page_size:
            lines.append([("class:hint", "(Use arrow keys to reveal more choices)")])

        fragments: StyleAndTextTuples = []
        for number, line in enumerate(lines):
            if number:
                fragments.append(("", "\n"))
            fragments.extend(line)
        return fragments

    def application(self) -> Application[T]:
        bindings = KeyBindings()

        @bindings.add("up")
        @bindings.add("k")
        def _previous(event: KeyPressEvent) -> None:
            self.move(-1)

        @bindings.add("down")
        @bindings.add("j")
        def _next(event: KeyPressEvent) -> None:
            self.move(1)

        @bindings.add("pageup")
        def _previous_page(event: KeyPressEvent) -> None:
            self.move(-self.page_size)

        @bindings.add("pagedown")
        def _next_page(event: KeyPressEvent) -> None:
            self.move(self.page_size)

        @bindings.add("home")
        def _first(event: KeyPressEvent) -> None:
            self.move(-len(self.choices))

        @bindings.add("end")
        def _last(event: KeyPressEvent) -> None:
            self.move(len(self.choices))

        @bindings.add("enter")
        def _select(event: KeyPressEvent) -> None:
            event.app.exit(result=self.selected.value)

        @bindings.add("c-c")
        @bindings.add("escape")
        @bindings.add("q")
        def _cancel(event: KeyPressEvent) -> None:
            event.app.exit(exception=SelectionCancelled(self.message))

        return Application(
            layout=Layout(
                Window(
                    FormattedTextControl(self.render, show_cursor=False),
                    always_hide_cursor=True,
                )
            ),
            key_bindings=bindings,
            style=PROMPT_STYLE,
            full_screen=False,
            erase_when_done=True,
        )


@dataclass(frozen=True, kw_only=True)
class TerminalPrompter:
    """Prompter that owns the terminal only while a prompt is displayed."""

    terminal: TerminalContext

    async def select[T](self, message: str, choices: Sequence[Choice[T]]) -> T:
        prompt = SelectPrompt(message, choices, page_size=self.terminal.page_size)
        value = await prompt.application().run_async()

        print_formatted_text(
            FormattedText(
                [
                    ("class:answer-mark", "✔ "),
                    ("class:message", message),
                    ("", " "),
                    *to_formatted_text(prompt.selected.title),
                ]
            ),
            style=PROMPT_STYLE,
        )
        return value
