"""Generation diagnostics entities."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class MessageSeverity(str, Enum):
    """Severity reported by the generation tool."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class GenerationMessage:
    """One diagnostic emitted while generating artifacts."""

    severity: MessageSeverity
    code: int | None
    text: str

    def render(self) -> str:
        if self.code is None:
            return f"{self.severity.value}: {self.text}"
        return f"{self.severity.value}({self.code}): {self.text}"


@dataclass(frozen=True)
class ErrorQueue:
    """Ordered diagnostics collected from one generation invocation."""

    messages: tuple[GenerationMessage, ...] = ()

    @classmethod
    def of(cls, messages: Iterable[GenerationMessage]) -> ErrorQueue:
        return cls(messages=tuple(messages))

    @property
    def errors(self) -> tuple[GenerationMessage, ...]:
        return tuple(m for m in self.messages if m.severity == MessageSeverity.ERROR)

    @property
    def warnings(self) -> tuple[GenerationMessage, ...]:
        return tuple(m for m in self.messages if m.severity == MessageSeverity.WARNING)

    def contains_errors(self) -> bool:
        return bool(self.errors)

    def render(self) -> str:
        return "\n".join(message.render() for message in self.messages)
