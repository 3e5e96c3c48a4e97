"""Test suite entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from grammar_runtime_tester.pipeline_execution.run_options import RunOptions, Stage


@dataclass(frozen=True)
class RuntimeTestDescriptor:  # pylint: disable=too-many-instance-attributes
    """One grammar test as declared in the suite file."""

    __test__ = False

    name: str
    backends: tuple[str, ...]
    grammar_name: str
    grammar: str
    lexer_name: str | None
    parser_name: str | None
    start_rule: str | None = None
    input: str = ""
    output: str = ""
    errors: str = ""
    use_listener: bool = False
    use_visitor: bool = False
    super_class: str | None = None
    show_diagnostic_errors: bool = False
    profile: bool = False
    show_dfa: bool = False
    end_stage: Stage = Stage.EXECUTE
    enabled: bool = True
    skip_backends: frozenset[str] = field(default_factory=frozenset)

    @property
    def grammar_file_name(self) -> str:
        return f"{self.grammar_name}.g4"

    def is_skipped_for(self, backend_id: str) -> bool:
        return not self.enabled or backend_id in self.skip_backends

    def to_run_options(self) -> RunOptions:
        return RunOptions(
            grammar_file_name=self.grammar_file_name,
            grammar_text=self.grammar,
            grammar_name=self.grammar_name,
            lexer_name=self.lexer_name,
            parser_name=self.parser_name,
            start_rule_name=self.start_rule,
            input=self.input,
            use_listener=self.use_listener,
            use_visitor=self.use_visitor,
            super_class=self.super_class,
            show_diagnostic_errors=self.show_diagnostic_errors,
            profile=self.profile,
            show_dfa=self.show_dfa,
            end_stage=self.end_stage,
        )


class OutcomeStatus(str, Enum):
    """Verdict for one test on one backend."""

    PASSED = "PASSED"
    FAILED = "FAILED"
    ERROR = "ERROR"
    SKIPPED = "SKIPPED"


@dataclass(frozen=True)
class TestOutcome:
    """Result of running one descriptor against one backend."""

    __test__ = False

    test_name: str
    backend: str
    status: OutcomeStatus
    stage_reached: Stage | None
    output: str | None = None
    errors: str | None = None
    detail: str | None = None

    @staticmethod
    def skipped(test_name: str, backend: str) -> TestOutcome:
        return TestOutcome(
            test_name=test_name,
            backend=backend,
            status=OutcomeStatus.SKIPPED,
            stage_reached=None,
        )
