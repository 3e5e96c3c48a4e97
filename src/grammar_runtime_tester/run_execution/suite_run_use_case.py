"""Suite execution use-case service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from grammar_runtime_tester.artifact_generation import ArtifactGenerator, ToolArtifactGenerator
from grammar_runtime_tester.backend_strategies import (
    BackendRegistry,
    UnknownBackendError,
    default_registry,
)
from grammar_runtime_tester.configuration import (
    Configuration,
    ConfigurationError,
    load_configuration,
)
from grammar_runtime_tester.pipeline_execution import RuntimeRunner
from grammar_runtime_tester.process_running import ProcessRunner
from grammar_runtime_tester.results_writing import RunMetadata, write_results_workbook
from grammar_runtime_tester.runtime_initialization import (
    DEFAULT_INITIALIZATION_CACHE,
    InitializationCache,
)
from grammar_runtime_tester.scaffold_rendering import ScaffoldRenderer
from grammar_runtime_tester.suite_execution import (
    RuntimeTestDescriptor,
    SuiteValidationError,
    TestOutcome,
    evaluate_state,
    read_suite,
)

from .run_contracts import SuiteRunOutcome, SuiteRunRequest

logger = logging.getLogger(__name__)

GeneratorFactory = Callable[[Configuration, ProcessRunner], ArtifactGenerator]


class SuiteExecutionError(Exception):
    """Raised when a suite run cannot be started."""


@dataclass(frozen=True)
class _SuiteCollaborators:
    """Shared collaborators handed to every test run of one suite."""

    configuration: Configuration
    registry: BackendRegistry
    generator: ArtifactGenerator
    process_runner: ProcessRunner
    scaffold_renderer: ScaffoldRenderer
    initialization_cache: InitializationCache
    save_test_dirs: bool


# pylint: disable=too-many-arguments
def execute_suite(
    request: SuiteRunRequest,
    *,
    registry: BackendRegistry | None = None,
    generator_factory: GeneratorFactory | None = None,
    process_runner: ProcessRunner | None = None,
    scaffold_renderer: ScaffoldRenderer | None = None,
    initialization_cache: InitializationCache | None = None,
) -> SuiteRunOutcome:
    """Run every enabled test of the suite and write the results workbook."""
    configuration, descriptors = _load_suite_artifacts(request)
    resolved_registry = registry or default_registry()
    scheduled = _schedule(descriptors, request.backends, resolved_registry)
    resolved_process_runner = process_runner or ProcessRunner(
        timeout_seconds=configuration.process.timeout_seconds
    )
    resolved_generator_factory = generator_factory or _tool_generator
    collaborators = _SuiteCollaborators(
        configuration=configuration,
        registry=resolved_registry,
        generator=resolved_generator_factory(configuration, resolved_process_runner),
        process_runner=resolved_process_runner,
        scaffold_renderer=scaffold_renderer or ScaffoldRenderer(),
        initialization_cache=initialization_cache or DEFAULT_INITIALIZATION_CACHE,
        save_test_dirs=request.save_test_dirs or configuration.execution.save_test_dir,
    )

    run_start = datetime.now(UTC)
    outcomes = _run_scheduled(scheduled, collaborators)

    output_path = _resolve_output_path(request.suite_path, request.output_dir)
    write_results_workbook(
        output_path=output_path,
        outcomes=outcomes,
        run_metadata=RunMetadata(
            run_start=run_start,
            config_path=configuration.path.resolve(),
            suite_path=Path(request.suite_path).resolve(),
            output_path=output_path.resolve(),
        ),
    )
    return SuiteRunOutcome(output_path=output_path.resolve(), outcomes=outcomes)


# pylint: enable=too-many-arguments


def _tool_generator(
    configuration: Configuration, process_runner: ProcessRunner
) -> ArtifactGenerator:
    return ToolArtifactGenerator(configuration.generator.command, process_runner)


def _load_suite_artifacts(
    request: SuiteRunRequest,
) -> tuple[Configuration, tuple[RuntimeTestDescriptor, ...]]:
    try:
        configuration = load_configuration(request.config_path)
        descriptors = read_suite(request.suite_path)
    except (ConfigurationError, SuiteValidationError, OSError) as exc:
        raise SuiteExecutionError(str(exc)) from exc
    return configuration, descriptors


def _schedule(
    descriptors: Sequence[RuntimeTestDescriptor],
    backend_filter: Sequence[str],
    registry: BackendRegistry,
) -> list[tuple[RuntimeTestDescriptor, str]]:
    for backend_id in backend_filter:
        if backend_id not in registry:
            raise SuiteExecutionError(f"Unknown backend requested: {backend_id}")
    scheduled: list[tuple[RuntimeTestDescriptor, str]] = []
    for descriptor in descriptors:
        for backend_id in descriptor.backends:
            if backend_filter and backend_id not in backend_filter:
                continue
            try:
                registry.get(backend_id)
            except UnknownBackendError as exc:
                raise SuiteExecutionError(f"{descriptor.name}: {exc}") from exc
            scheduled.append((descriptor, backend_id))
    return scheduled


def _run_scheduled(
    scheduled: Sequence[tuple[RuntimeTestDescriptor, str]],
    collaborators: _SuiteCollaborators,
) -> tuple[TestOutcome, ...]:
    outcomes: dict[int, TestOutcome] = {}
    futures: dict[Future[TestOutcome], int] = {}
    max_workers = max(1, collaborators.configuration.execution.parallelism)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for index, (descriptor, backend_id) in enumerate(scheduled):
            if descriptor.is_skipped_for(backend_id):
                outcomes[index] = TestOutcome.skipped(descriptor.name, backend_id)
                continue
            future = executor.submit(_run_single, descriptor, backend_id, collaborators)
            futures[future] = index
        wait(futures.keys())

    for future, index in futures.items():
        outcomes[index] = future.result()
    return tuple(outcomes[index] for index in range(len(scheduled)))


def _run_single(
    descriptor: RuntimeTestDescriptor,
    backend_id: str,
    collaborators: _SuiteCollaborators,
) -> TestOutcome:
    backend = collaborators.registry.get(backend_id)
    with RuntimeRunner(
        backend,
        generator=collaborators.generator,
        process_runner=collaborators.process_runner,
        scaffold_renderer=collaborators.scaffold_renderer,
        paths=collaborators.configuration.paths,
        initialization_cache=collaborators.initialization_cache,
        save_test_dir=collaborators.save_test_dirs,
    ) as runner:
        state = runner.run(descriptor.to_run_options())
    outcome = evaluate_state(descriptor, backend_id, state)
    logger.info("%s [%s]: %s", descriptor.name, backend_id, outcome.status.value)
    return outcome


def _resolve_output_path(suite_path: str, output_dir: str | None) -> Path:
    suite_file = Path(suite_path)
    destination = Path(output_dir) if output_dir else suite_file.parent
    timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    return destination / f"{suite_file.stem}-results-{timestamp}.xlsx"
