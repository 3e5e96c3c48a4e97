"""Turn a terminal pipeline state into a test verdict."""

from __future__ import annotations

from grammar_runtime_tester.pipeline_execution.pipeline_states import (
    ExecutedState,
    PipelineState,
)

from .suite_models import OutcomeStatus, RuntimeTestDescriptor, TestOutcome


def evaluate_state(
    descriptor: RuntimeTestDescriptor, backend_id: str, state: PipelineState
) -> TestOutcome:
    """Compare the run's final state with the descriptor's expectations."""
    if state.contains_errors():
        return TestOutcome(
            test_name=descriptor.name,
            backend=backend_id,
            status=OutcomeStatus.ERROR,
            stage_reached=state.stage,
            detail=state.error_message(),
        )
    if not isinstance(state, ExecutedState):
        return TestOutcome(
            test_name=descriptor.name,
            backend=backend_id,
            status=OutcomeStatus.PASSED,
            stage_reached=state.stage,
        )

    output = state.output or ""
    errors = state.errors or ""
    mismatches = []
    if output != descriptor.output:
        mismatches.append(f"expected output: {descriptor.output!r}\nactual output: {output!r}")
    if errors != descriptor.errors:
        mismatches.append(f"expected errors: {descriptor.errors!r}\nactual errors: {errors!r}")
    return TestOutcome(
        test_name=descriptor.name,
        backend=backend_id,
        status=OutcomeStatus.FAILED if mismatches else OutcomeStatus.PASSED,
        stage_reached=state.stage,
        output=output,
        errors=errors,
        detail="\n".join(mismatches) or None,
    )
