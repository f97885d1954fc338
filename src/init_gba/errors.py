"""Exceptions raised by the init-gba workflows."""

from __future__ import annotations

from typing import Optional, Sequence


class InitGbaError(Exception):
    """Base class for errors that abort a workflow."""


class OperationCancelled(InitGbaError):
    """Raised when the user cancels an interactive prompt."""

    def __init__(self, message: str = "Operation cancelled.") -> None:
        super().__init__(message)


class AbortedByUser(OperationCancelled):
    """Raised when the user declines a confirmation the workflow needs."""


class MissingInputError(InitGbaError):
    """Raised when a value is required but prompting is disabled."""

    def __init__(self, prompt: str) -> None:
        super().__init__(f"Missing required input: {prompt}")
        self.prompt = prompt


class MissingToolError(InitGbaError):
    """Raised when a required executable is not on PATH."""

    def __init__(self, tool: str) -> None:
        super().__init__(f"{tool} is required but was not found on PATH.")
        self.tool = tool


class CommandError(InitGbaError):
    """Raised when an external command fails or cannot be started."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        exit_code: Optional[int],
        stderr: str = "",
    ) -> None:
        self.command = command
        self.args_list = list(args)
        self.exit_code = exit_code
        self.stderr = stderr
        if exit_code is None:
            message = f"Failed to run {command}: {stderr.strip() or 'command not found'}"
        else:
            message = f"{command} {' '.join(self.args_list)} exited with code {exit_code}"
            if stderr.strip():
                message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class TemplateNotFoundError(InitGbaError):
    """Raised when the template directory does not exist."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Template path does not exist: {path}")
        self.path = path


__all__ = [
    "InitGbaError",
    "OperationCancelled",
    "AbortedByUser",
    "MissingInputError",
    "MissingToolError",
    "CommandError",
    "TemplateNotFoundError",
]
