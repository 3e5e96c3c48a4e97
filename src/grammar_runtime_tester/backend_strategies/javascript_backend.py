"""JavaScript (Node.js) backend."""

from __future__ import annotations

import json
from collections.abc import Mapping

from grammar_runtime_tester.pipeline_execution.pipeline_states import (
    CompiledState,
    GeneratedState,
)
from grammar_runtime_tester.pipeline_execution.run_context import RunContext
from grammar_runtime_tester.pipeline_execution.run_options import RunOptions
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.test_workspace import HarnessPaths

from .backend_contract import ArtifactSuffixes, BackendStrategy

_PACKAGE_MANIFEST = {"type": "module"}


class JavaScriptBackend(BackendStrategy):
    """Runs the generated ES module recognizer with Node.js."""

    identifier = "JavaScript"

    def file_extension(self) -> str:
        return "js"

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes(base_listener=None, base_visitor=None)

    def runtime_tool_name(self) -> str:
        return "node"

    def exec_environment(self, context: RunContext) -> Mapping[str, str]:
        return {"NODE_PATH": str(context.paths.cache_path(self.identifier) / "node_modules")}

    def perform_one_time_initialization(
        self, paths: HarnessPaths, process_runner: ProcessRunner
    ) -> None:
        cache_path = paths.cache_path(self.identifier)
        cache_path.mkdir(parents=True, exist_ok=True)
        runtime_path = paths.runtime_path(self.identifier)
        self.run_command(
            process_runner,
            ("npm", "install", "--prefix", str(cache_path), str(runtime_path)),
            cache_path,
            description="install the JavaScript runtime",
        )

    def compile(
        self, options: RunOptions, generated_state: GeneratedState, context: RunContext
    ) -> CompiledState:
        # generated files and the driver are ES modules
        context.test_directory.write_file("package.json", json.dumps(_PACKAGE_MANIFEST))
        return CompiledState(generated_state)
