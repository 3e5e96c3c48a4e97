"""Collaborators a backend may use during one pipeline run."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.scaffold_rendering import ScaffoldRenderer
from grammar_runtime_tester.test_workspace import HarnessPaths, TestDirectory


@dataclass(frozen=True)
class RunContext:
    """Per-run view of the working directory and shared collaborators."""

    test_directory: TestDirectory
    process_runner: ProcessRunner
    scaffold_renderer: ScaffoldRenderer
    paths: HarnessPaths

    @property
    def work_dir(self) -> Path:
        return self.test_directory.path
