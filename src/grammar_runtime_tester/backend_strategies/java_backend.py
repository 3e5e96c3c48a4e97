"""Java backend."""

from __future__ import annotations

import os
from collections.abc import Sequence

from grammar_runtime_tester.pipeline_execution.pipeline_states import (
    CompiledState,
    GeneratedState,
)
from grammar_runtime_tester.pipeline_execution.run_context import RunContext
from grammar_runtime_tester.pipeline_execution.run_options import RunOptions
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.test_workspace import HarnessPaths

from .backend_contract import BackendStrategy


class JavaBackend(BackendStrategy):
    """Compiles the generated sources with javac and runs the driver class."""

    identifier = "Java"

    def runtime_tool_name(self) -> str:
        return "java"

    def exec_file_name(self) -> str:
        return self.test_file_name

    def class_path(self, context: RunContext) -> str:
        return os.pathsep.join(
            (str(context.paths.runtime_path(self.identifier)), str(context.work_dir))
        )

    def extra_run_args(self, context: RunContext) -> Sequence[str]:
        return ("-cp", self.class_path(context))

    def perform_one_time_initialization(
        self, paths: HarnessPaths, process_runner: ProcessRunner
    ) -> None:
        cache_path = paths.cache_path(self.identifier)
        cache_path.mkdir(parents=True, exist_ok=True)
        self.run_command(process_runner, ("javac", "-version"), cache_path, description="run javac")

    def compile(
        self, options: RunOptions, generated_state: GeneratedState, context: RunContext
    ) -> CompiledState:
        sources = [artifact.file_name for artifact in generated_state.artifacts]
        sources.append(self.scaffold_file_name())
        self.run_command(
            context.process_runner,
            (
                "javac",
                "-encoding",
                "UTF-8",
                "-cp",
                self.class_path(context),
                "-d",
                str(context.work_dir),
                *sources,
            ),
            context.work_dir,
            description="compile generated Java sources",
        )
        return CompiledState(generated_state)
