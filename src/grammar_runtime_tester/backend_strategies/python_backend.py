"""Python 3 backend."""

from __future__ import annotations

from collections.abc import Mapping

from grammar_runtime_tester.pipeline_execution.run_context import RunContext
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.test_workspace import HarnessPaths

from .backend_contract import ArtifactSuffixes, BackendStrategy


class Python3Backend(BackendStrategy):
    """Runs the generated recognizer with a Python 3 interpreter."""

    identifier = "Python3"

    def file_extension(self) -> str:
        return "py"

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes(base_listener=None, base_visitor=None)

    def runtime_tool_name(self) -> str:
        return "python3"

    def exec_environment(self, context: RunContext) -> Mapping[str, str]:
        return {"PYTHONPATH": str(context.paths.runtime_path(self.identifier))}

    def perform_one_time_initialization(
        self, paths: HarnessPaths, process_runner: ProcessRunner
    ) -> None:
        runtime_path = paths.runtime_path(self.identifier)
        cache_path = paths.cache_path(self.identifier)
        cache_path.mkdir(parents=True, exist_ok=True)
        self.run_command(
            process_runner,
            (self.runtime_tool_name(), "-c", "import antlr4"),
            cache_path,
            description=f"import the Python runtime from {runtime_path}",
            environment={"PYTHONPATH": str(runtime_path)},
        )
