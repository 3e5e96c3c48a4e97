"""Go backend."""

from __future__ import annotations

import shutil
from collections.abc import Mapping, Sequence

from grammar_runtime_tester.pipeline_execution.pipeline_states import (
    CompiledState,
    GeneratedState,
)
from grammar_runtime_tester.pipeline_execution.run_context import RunContext
from grammar_runtime_tester.pipeline_execution.run_options import RunOptions
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.test_workspace import HarnessPaths

from .backend_contract import ArtifactSuffixes, BackendStrategy

GO_MODULE_NAME = "test"
GO_PACKAGE_NAME = "parser"
GO_RUNTIME_MODULE = "github.com/antlr4-go/antlr/v4"


class GoBackend(BackendStrategy):
    """Builds the generated package into a throwaway module and runs it with `go run`."""

    identifier = "Go"
    always_split_artifacts = True

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes(
            lexer="_lexer",
            parser="_parser",
            base_listener="_base_listener",
            listener="_listener",
            base_visitor="_base_visitor",
            visitor="_visitor",
        )

    def grammar_name_to_file_name(self, grammar_name: str) -> str:
        return grammar_name.lower()

    def start_rule_to_entry_point(self, start_rule_name: str | None) -> str | None:
        if not start_rule_name:
            return start_rule_name
        return start_rule_name[0].upper() + start_rule_name[1:]

    def extra_generation_options(self) -> Sequence[str]:
        return ("-package", GO_PACKAGE_NAME)

    def extra_run_args(self, context: RunContext) -> Sequence[str]:
        return ("run",)

    def exec_environment(self, context: RunContext) -> Mapping[str, str]:
        return {"GOCACHE": str(context.paths.cache_path(self.identifier) / "build")}

    def extra_scaffold_parameters(
        self, options: RunOptions, context: RunContext
    ) -> Mapping[str, str]:
        return {"goModuleName": GO_MODULE_NAME}

    def perform_one_time_initialization(
        self, paths: HarnessPaths, process_runner: ProcessRunner
    ) -> None:
        cache_path = paths.cache_path(self.identifier)
        cache_path.mkdir(parents=True, exist_ok=True)
        self.run_command(process_runner, ("go", "version"), cache_path, description="run go")

    def compile(
        self, options: RunOptions, generated_state: GeneratedState, context: RunContext
    ) -> CompiledState:
        package_dir = context.work_dir / GO_PACKAGE_NAME
        package_dir.mkdir(parents=True, exist_ok=True)
        for artifact in generated_state.artifacts:
            source = context.work_dir / artifact.file_name
            if source.exists():
                shutil.move(str(source), str(package_dir / artifact.file_name))

        runtime_path = context.paths.runtime_path(self.identifier)
        context.test_directory.write_file(
            "go.mod",
            f"module {GO_MODULE_NAME}\n\n"
            f"require {GO_RUNTIME_MODULE} v4.0.0\n\n"
            f"replace {GO_RUNTIME_MODULE} => {runtime_path}\n",
        )
        self.run_command(
            context.process_runner,
            ("go", "mod", "tidy"),
            context.work_dir,
            description="resolve Go module dependencies",
            environment=self.exec_environment(context),
        )
        return CompiledState(generated_state)
