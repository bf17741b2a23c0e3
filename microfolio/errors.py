"""Error types for microfolio.

Every failure the wrapper detects itself is a ``MicrofolioError``. Click shows
it as ``Error: <message>`` on stdout, followed by the remediation hint, and
exits with status 1.
"""

from __future__ import annotations

import click


class MicrofolioError(click.ClickException):
    """Precondition or usage failure with an optional remediation hint.

    Attributes:
        message: Human-readable error message.
        hint: Extra lines telling the user how to recover, or None.
    """

    exit_code = 1

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message

    def show(self, file=None) -> None:
        if file is None:
            file = click.get_text_stream("stdout")
        super().show(file)


class ProjectError(MicrofolioError):
    """Failure while scaffolding a new project."""
