"""Interactive and non-interactive input behind one interface."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Tuple, TypeVar

import click
import typer

from .errors import MissingInputError, OperationCancelled

T = TypeVar("T")


def _choice_key(value: object) -> str:
    return value.value if isinstance(value, Enum) else str(value)


class PromptSession:
    """Ask the user for input, or fall back to defaults when prompting is off.

    In non-interactive mode confirmations resolve to their default and text
    prompts return their default or raise :class:`MissingInputError`. In
    interactive mode Ctrl-C or end-of-input raises :class:`OperationCancelled`.
    """

    def __init__(self, non_interactive: bool) -> None:
        self.non_interactive = non_interactive

    def close(self) -> None:
        """Nothing to release; typer owns the terminal."""

    def confirm(self, message: str, default: bool = False) -> bool:
        if self.non_interactive:
            return default
        try:
            return typer.confirm(message, default=default)
        except click.Abort as exc:
            raise OperationCancelled() from exc

    def text(self, message: str, default: Optional[str] = None) -> str:
        if self.non_interactive:
            if default is not None:
                return default
            raise MissingInputError(message)

        while True:
            try:
                value = typer.prompt(
                    message,
                    default=default if default is not None else "",
                    show_default=default is not None,
                )
            except click.Abort as exc:
                raise OperationCancelled() from exc
            value = str(value).strip()
            if value:
                return value
            if default is not None:
                return default
            typer.echo("Value is required")

    def select(self, message: str, choices: Sequence[Tuple[T, str]], default: T) -> T:
        """Pick one of ``choices`` (value, label) pairs."""

        if self.non_interactive:
            return default
        values = [_choice_key(value) for value, _ in choices]
        for value, label in choices:
            typer.echo(f"  {_choice_key(value)}: {label}")
        try:
            picked = typer.prompt(
                message,
                default=_choice_key(default),
                type=click.Choice(values),
            )
        except click.Abort as exc:
            raise OperationCancelled() from exc
        for value, _ in choices:
            if _choice_key(value) == picked:
                return value
        return default


def resolve_text(
    value: Optional[str],
    prompts: PromptSession,
    message: str,
    default: Optional[str] = None,
) -> str:
    """Use a non-blank flag value, otherwise ask."""

    if value and value.strip():
        return value.strip()
    return prompts.text(message, default)


__all__ = ["PromptSession", "resolve_text"]
