"""Console input services.

Defines the ``InputService`` protocol the resolver prompts through, plus
``RichInputService``, a terminal implementation built on Rich.

Usage
-----
::

    from certflow.console import RichInputService

    input_service = RichInputService()
    picked = input_service.choose_required(
        "Pick a colour", ["red", "green"], lambda c: Choice(c, c.title())
    )
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import IO, Protocol, TypeVar, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from certflow.console.choice import Choice

logger = logging.getLogger(__name__)

T = TypeVar("T")

CANCEL_COMMAND = "c"


@runtime_checkable
class InputService(Protocol):
    """Request/response channel to the human operator.

    Each ``choose_*`` call blocks until the operator has answered.
    """

    def create_space(self) -> None:
        """Separate the next output from what came before."""
        ...  # pragma: no cover

    def show(self, label: str | None, value: str) -> None:
        """Display an informational line."""
        ...  # pragma: no cover

    def choose_optional(
        self,
        what: str,
        options: Sequence[T],
        creator: Callable[[T], Choice[T]],
        none_label: str,
    ) -> T | None:
        """Let the user pick one option, or ``None`` via ``none_label``."""
        ...  # pragma: no cover

    def choose_required(
        self,
        what: str,
        options: Sequence[T],
        creator: Callable[[T], Choice[T]],
    ) -> T:
        """Let the user pick exactly one option."""
        ...  # pragma: no cover


class RichInputService:
    """Numbered-menu ``InputService`` rendered with Rich.

    Parameters
    ----------
    console:
        Console to render to.  Defaults to a new stdout console.
    stream:
        Optional stream to read answers from instead of stdin.
    """

    def __init__(self, console: Console | None = None, stream: IO[str] | None = None) -> None:
        self._console = console or Console()
        self._stream = stream

    def create_space(self) -> None:
        self._console.print()

    def show(self, label: str | None, value: str) -> None:
        if label:
            self._console.print(f" [bold]{escape(label)}:[/bold] {escape(value)}")
        else:
            self._console.print(f" {escape(value)}")

    def choose_optional(
        self,
        what: str,
        options: Sequence[T],
        creator: Callable[[T], Choice[T]],
        none_label: str,
    ) -> T | None:
        choices = [creator(option) for option in options]
        picked = self._choose(what, choices, none_label)
        return None if picked is None else picked.item

    def choose_required(
        self,
        what: str,
        options: Sequence[T],
        creator: Callable[[T], Choice[T]],
    ) -> T:
        choices = [creator(option) for option in options]
        if not any(not choice.is_disabled for choice in choices):
            raise ValueError(f"No selectable options for {what!r}.")
        picked = self._choose(what, choices, None)
        assert picked is not None
        return picked.item

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _choose(
        self, what: str, choices: list[Choice[T]], none_label: str | None
    ) -> Choice[T] | None:
        self._render(choices, none_label)
        default_key = next(
            (str(index) for index, choice in enumerate(choices, start=1) if choice.default),
            None,
        )
        while True:
            answer = Prompt.ask(
                f" {escape(what)}",
                console=self._console,
                default=default_key,
                stream=self._stream,
            )
            key = (answer or "").strip().lower() or (default_key or "")
            if none_label is not None and key == CANCEL_COMMAND:
                logger.debug("User picked %r for %r", none_label, what)
                return None
            if key.isdigit() and 1 <= int(key) <= len(choices):
                choice = choices[int(key) - 1]
                if choice.is_disabled:
                    self._console.print(
                        f" [red]Option not available:[/red] "
                        f"{escape(choice.disabled_reason or 'disabled')}"
                    )
                    continue
                return choice
            self._console.print(f" [red]Invalid choice:[/red] {escape(answer or '')}")

    def _render(self, choices: list[Choice[T]], none_label: str | None) -> None:
        self._console.print()
        for index, choice in enumerate(choices, start=1):
            marker = " [green]<- default[/green]" if choice.default else ""
            line = f" {index:>2}: {escape(choice.description)}{marker}"
            if choice.is_disabled:
                reason = escape(choice.disabled_reason or "")
                line = f" [dim]{index:>2}: {escape(choice.description)}[/dim]"
                if reason:
                    line += f" [dim]({reason})[/dim]"
            self._console.print(line)
        if none_label is not None:
            self._console.print(f"  {CANCEL_COMMAND.upper()}: {escape(none_label)}")
        self._console.print()
