"""Generate, compile and execute one grammar test against one backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from grammar_runtime_tester.artifact_generation import ArtifactGenerator, ErrorQueue
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.runtime_initialization import (
    DEFAULT_INITIALIZATION_CACHE,
    InitializationCache,
)
from grammar_runtime_tester.scaffold_rendering import ScaffoldRenderer
from grammar_runtime_tester.test_workspace import HarnessPaths, TestDirectory

from .pipeline_states import CompiledState, ExecutedState, GeneratedState, PipelineState
from .run_context import RunContext
from .run_options import INPUT_FILE_NAME, RunOptions, Stage

if TYPE_CHECKING:
    from grammar_runtime_tester.backend_strategies.backend_contract import BackendStrategy

logger = logging.getLogger(__name__)


class RuntimeNotInitializedError(Exception):
    """Reported in place of compilation when a backend runtime failed to initialize."""


class RuntimeRunner:  # pylint: disable=too-many-instance-attributes
    """Pipeline orchestrator owning one test directory for its lifetime."""

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        backend: BackendStrategy,
        *,
        generator: ArtifactGenerator,
        process_runner: ProcessRunner,
        scaffold_renderer: ScaffoldRenderer | None = None,
        paths: HarnessPaths | None = None,
        initialization_cache: InitializationCache | None = None,
        test_directory: TestDirectory | None = None,
        save_test_dir: bool = False,
    ) -> None:
        self._backend = backend
        self._generator = generator
        self._process_runner = process_runner
        self._paths = paths or HarnessPaths()
        self._initialization_cache = initialization_cache or DEFAULT_INITIALIZATION_CACHE
        self._test_directory = test_directory or TestDirectory.for_owner(
            type(backend).__name__, self._paths.temp_root, save_test_dir=save_test_dir
        )
        self._context = RunContext(
            test_directory=self._test_directory,
            process_runner=process_runner,
            scaffold_renderer=scaffold_renderer or ScaffoldRenderer(),
            paths=self._paths,
        )

    # pylint: enable=too-many-arguments

    @property
    def backend(self) -> BackendStrategy:
        return self._backend

    @property
    def test_directory(self) -> TestDirectory:
        return self._test_directory

    def run(self, options: RunOptions) -> PipelineState:
        """Run the pipeline up to `options.end_stage` or the first failing stage."""
        generated_state = self._generate(options)
        if generated_state.contains_errors() or options.end_stage == Stage.GENERATE:
            return generated_state

        if not self._ensure_runtime_initialized():
            # the initialization failure is reported once by the cache
            return CompiledState(generated_state, self._runtime_not_initialized_error())

        try:
            self._backend.write_execution_scaffold(options, self._context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return CompiledState(generated_state, exc)

        compiled_state = self._compile(options, generated_state)
        if compiled_state.contains_errors() or options.end_stage == Stage.COMPILE:
            return compiled_state

        try:
            self._test_directory.write_file(INPUT_FILE_NAME, options.input)
        except OSError as exc:
            return ExecutedState(compiled_state, None, None, exc)

        return self._execute(options, compiled_state)

    def close(self) -> None:
        self._test_directory.close()

    def __enter__(self) -> RuntimeRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _generate(self, options: RunOptions) -> GeneratedState:
        extra_options: list[str] = list(self._backend.extra_generation_options())
        if options.use_visitor:
            extra_options.append("-visitor")
        if options.super_class:
            extra_options.append(f"-DsuperClass={options.super_class}")
        self._warn_on_unsupported_features(options)
        generation_error: Exception | None = None
        try:
            error_queue = self._generator.generate(
                self._test_directory.path,
                self._backend.identifier,
                options.grammar_file_name,
                options.grammar_text,
                False,
                tuple(extra_options),
            )
        except Exception as exc:  # pylint: disable=broad-exception-caught
            error_queue, generation_error = ErrorQueue(), exc
        artifacts = tuple(self._backend.enumerate_generated_artifacts(options))
        return GeneratedState(error_queue, artifacts, generation_error)

    def _ensure_runtime_initialized(self) -> bool:
        backend = self._backend
        return self._initialization_cache.ensure_initialized(
            backend.identifier,
            lambda: backend.perform_one_time_initialization(self._paths, self._process_runner),
        )

    def _runtime_not_initialized_error(self) -> RuntimeNotInitializedError:
        title = self._backend.title_name
        error = RuntimeNotInitializedError(f"{title} runtime is not initialized")
        status = self._initialization_cache.status_for(self._backend.identifier)
        if status is not None and status.error is not None:
            error.__cause__ = status.error
        return error

    def _compile(self, options: RunOptions, generated_state: GeneratedState) -> CompiledState:
        try:
            return self._backend.compile(options, generated_state, self._context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return CompiledState(generated_state, exc)

    def _execute(self, options: RunOptions, compiled_state: CompiledState) -> ExecutedState:
        try:
            return self._backend.execute(options, compiled_state, self._context)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            return ExecutedState(compiled_state, None, None, exc)

    def _warn_on_unsupported_features(self, options: RunOptions) -> None:
        suffixes = self._backend.artifact_suffixes()
        title = self._backend.title_name
        if options.use_listener and suffixes.listener is None:
            logger.warning("%s generates no listeners; ignoring use_listener", title)
        if options.use_visitor and suffixes.visitor is None:
            logger.warning("%s generates no visitors; ignoring use_visitor", title)
