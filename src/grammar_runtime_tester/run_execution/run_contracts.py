"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from grammar_runtime_tester.suite_execution.suite_models import OutcomeStatus, TestOutcome


@dataclass(frozen=True)
class SuiteRunRequest:
    """Input contract for executing one suite."""

    config_path: str
    suite_path: str
    output_dir: str | None = None
    backends: tuple[str, ...] = ()
    save_test_dirs: bool = False


@dataclass(frozen=True)
class SuiteRunOutcome:
    """Output contract for one completed suite run."""

    output_path: Path
    outcomes: tuple[TestOutcome, ...]

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def succeeded(self) -> bool:
        return all(
            outcome.status in (OutcomeStatus.PASSED, OutcomeStatus.SKIPPED)
            for outcome in self.outcomes
        )
