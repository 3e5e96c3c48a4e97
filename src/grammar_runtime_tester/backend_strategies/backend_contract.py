"""Capabilities every backend provides to the pipeline.

A backend overrides only what differs from the defaults below: file naming,
which artifacts the generation tool produces, how the driver scaffold is
parameterized, and how the generated code is compiled and executed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from grammar_runtime_tester.pipeline_execution.pipeline_states import (
    CompiledState,
    ExecutedState,
    GeneratedState,
)
from grammar_runtime_tester.pipeline_execution.run_context import RunContext
from grammar_runtime_tester.pipeline_execution.run_options import (
    INPUT_FILE_NAME,
    GeneratedArtifact,
    RunOptions,
)
from grammar_runtime_tester.process_running import ProcessResult, ProcessRunError, ProcessRunner
from grammar_runtime_tester.test_workspace import HarnessPaths


class BackendCommandError(Exception):
    """Raised when a backend toolchain command cannot run or exits with a failure."""


@dataclass(frozen=True)
class ArtifactSuffixes:
    """Suffixes appended to the grammar file name for each generated artifact.

    A `None` base suffix means the backend generates no separate base class
    file; a `None` listener or visitor suffix means the backend generates no
    listener or visitor at all.
    """

    lexer: str = "Lexer"
    parser: str = "Parser"
    base_listener: str | None = "BaseListener"
    listener: str | None = "Listener"
    base_visitor: str | None = "BaseVisitor"
    visitor: str | None = "Visitor"


class BackendStrategy(ABC):
    """Base class for backends; only `identifier` has no default."""

    always_split_artifacts = False
    test_file_name = "Test"

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Unique backend key used for generation, caching and paths."""

    @property
    def title_name(self) -> str:
        return self.identifier

    def file_extension(self) -> str:
        return self.identifier.lower()

    def artifact_suffixes(self) -> ArtifactSuffixes:
        return ArtifactSuffixes()

    def grammar_name_to_file_name(self, grammar_name: str) -> str:
        return grammar_name

    def start_rule_to_entry_point(self, start_rule_name: str | None) -> str | None:
        return start_rule_name

    def scaffold_file_name(self) -> str:
        return f"{self.test_file_name}.{self.file_extension()}"

    def exec_file_name(self) -> str:
        return self.scaffold_file_name()

    def runtime_tool_name(self) -> str | None:
        return self.identifier.lower()

    def extra_generation_options(self) -> Sequence[str]:
        return ()

    def extra_run_args(self, context: RunContext) -> Sequence[str]:
        return ()

    def exec_environment(self, context: RunContext) -> Mapping[str, str] | None:
        return None

    def extra_scaffold_parameters(
        self, options: RunOptions, context: RunContext
    ) -> Mapping[str, Any]:
        return {}

    def enumerate_generated_artifacts(self, options: RunOptions) -> Iterator[GeneratedArtifact]:
        """Yield the expected artifacts in generation order; pure in `options`."""
        suffixes = self.artifact_suffixes()
        extension = f".{self.file_extension()}"
        file_grammar_name = self.grammar_name_to_file_name(options.grammar_name)
        split = options.is_combined_grammar or self.always_split_artifacts

        if options.lexer_name is not None:
            suffix = suffixes.lexer if split else ""
            yield GeneratedArtifact(f"{file_grammar_name}{suffix}{extension}", is_parser=False)
        if options.parser_name is None:
            return
        suffix = suffixes.parser if split else ""
        yield GeneratedArtifact(f"{file_grammar_name}{suffix}{extension}", is_parser=True)
        if options.use_listener and suffixes.listener is not None:
            yield GeneratedArtifact(f"{file_grammar_name}{suffixes.listener}{extension}", True)
            if suffixes.base_listener is not None:
                yield GeneratedArtifact(
                    f"{file_grammar_name}{suffixes.base_listener}{extension}", True
                )
        if options.use_visitor and suffixes.visitor is not None:
            yield GeneratedArtifact(f"{file_grammar_name}{suffixes.visitor}{extension}", True)
            if suffixes.base_visitor is not None:
                yield GeneratedArtifact(
                    f"{file_grammar_name}{suffixes.base_visitor}{extension}", True
                )

    def scaffold_parameters(self, options: RunOptions, context: RunContext) -> dict[str, Any]:
        parameters: dict[str, Any] = {
            "grammarName": options.grammar_name,
            "lexerName": options.lexer_name,
            "parserName": options.parser_name,
            "parserStartRuleName": self.start_rule_to_entry_point(options.start_rule_name),
            "debug": options.show_diagnostic_errors,
            "profile": options.profile,
            "showDFA": options.show_dfa,
            "useListener": options.use_listener,
            "useVisitor": options.use_visitor,
        }
        parameters.update(self.extra_scaffold_parameters(options, context))
        return parameters

    def write_execution_scaffold(self, options: RunOptions, context: RunContext) -> Path:
        text = context.scaffold_renderer.render(
            self.identifier,
            self.scaffold_file_name(),
            self.scaffold_parameters(options, context),
        )
        return context.test_directory.write_file(self.scaffold_file_name(), text)

    def perform_one_time_initialization(
        self, paths: HarnessPaths, process_runner: ProcessRunner
    ) -> None:
        """Prepare shared runtime state; raise to mark the backend unusable."""

    def compile(
        self, options: RunOptions, generated_state: GeneratedState, context: RunContext
    ) -> CompiledState:
        return CompiledState(generated_state)

    def execute(
        self, options: RunOptions, compiled_state: CompiledState, context: RunContext
    ) -> ExecutedState:
        args: list[str] = []
        tool_name = self.runtime_tool_name()
        if tool_name is not None:
            args.append(tool_name)
        args.extend(self.extra_run_args(context))
        args.append(self.exec_file_name())
        args.append(INPUT_FILE_NAME)
        try:
            result = context.process_runner.run(
                args, context.work_dir, self.exec_environment(context)
            )
        except ProcessRunError as exc:
            return ExecutedState(compiled_state, None, None, exc)
        return ExecutedState(compiled_state, result.output, result.errors)

    @staticmethod
    def run_command(
        process_runner: ProcessRunner,
        command: Sequence[str],
        work_dir: Path,
        *,
        description: str | None = None,
        environment: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run a toolchain command, failing on spawn errors and non-zero exits."""
        try:
            result = process_runner.run(command, work_dir, environment)
        except ProcessRunError as exc:
            if description is None:
                raise BackendCommandError(str(exc)) from exc
            raise BackendCommandError(f"can't {description}: {exc}") from exc
        if not result.succeeded:
            detail = result.errors.strip() or result.output.strip()
            prefix = f"can't {description}" if description else "command failed"
            raise BackendCommandError(f"{prefix} (exit code {result.exit_code}): {detail}")
        return result
