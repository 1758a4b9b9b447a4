"""Errors raised while parsing resource text."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass


class NameSyntaxError(Exception):
    """A name line that cannot be parsed at all."""


class ConfigurationError(Exception):
    """An invalid resource header."""


@dataclass(frozen=True)
class ParseError:
    message: str
    line: int  # 1-based, in the whole document
    column: int = 0
    context: str = ""

    def __str__(self) -> str:
        text = f"{self.message} at {self.line}:{self.column}"
        if self.context:
            text += f"\n{self.context}\n{' ' * self.column}^"
        return text


class ResourceSyntaxError(Exception):
    """All problems found in one document."""

    def __init__(self, errors: Iterable[ParseError]) -> None:
        self.errors: Sequence[ParseError] = sorted(
            errors, key=lambda error: (error.line, error.column)
        )
        super().__init__("\n\n".join(str(error) for error in self.errors))

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]
