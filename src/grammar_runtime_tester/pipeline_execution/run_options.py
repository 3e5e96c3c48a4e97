"""Pipeline input entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

INPUT_FILE_NAME = "input"


class Stage(IntEnum):
    """Ordered pipeline checkpoints."""

    GENERATE = 1
    COMPILE = 2
    EXECUTE = 3

    @classmethod
    def parse(cls, value: str) -> Stage:
        try:
            return cls[value.strip().upper()]
        except KeyError as exc:
            choices = ", ".join(stage.name.lower() for stage in cls)
            raise ValueError(f"Unknown stage '{value}'. Expected one of: {choices}.") from exc


@dataclass(frozen=True)
class RunOptions:  # pylint: disable=too-many-instance-attributes
    """Everything one pipeline run needs; created once per test invocation."""

    grammar_file_name: str
    grammar_text: str
    grammar_name: str
    lexer_name: str | None = None
    parser_name: str | None = None
    start_rule_name: str | None = None
    input: str = ""
    use_listener: bool = False
    use_visitor: bool = False
    super_class: str | None = None
    show_diagnostic_errors: bool = False
    profile: bool = False
    show_dfa: bool = False
    end_stage: Stage = Stage.EXECUTE

    @property
    def is_combined_grammar(self) -> bool:
        return self.lexer_name is not None and self.parser_name is not None


@dataclass(frozen=True)
class GeneratedArtifact:
    """One file the generation tool is expected to produce."""

    file_name: str
    is_parser: bool
