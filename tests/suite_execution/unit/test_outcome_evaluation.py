"""Outcome evaluation tests."""

from __future__ import annotations

from grammar_runtime_tester.artifact_generation import (
    ErrorQueue,
    GenerationMessage,
    MessageSeverity,
)
from grammar_runtime_tester.pipeline_execution import (
    CompiledState,
    ExecutedState,
    GeneratedState,
    Stage,
)
from grammar_runtime_tester.suite_execution import (
    OutcomeStatus,
    RuntimeTestDescriptor,
    evaluate_state,
)


def _descriptor(**overrides) -> RuntimeTestDescriptor:
    values = {
        "name": "t",
        "backends": ("Python3",),
        "grammar_name": "T",
        "grammar": "grammar T;",
        "lexer_name": "TLexer",
        "parser_name": "TParser",
        "output": "(s a)\n",
    }
    values.update(overrides)
    return RuntimeTestDescriptor(**values)


def _compiled() -> CompiledState:
    return CompiledState(GeneratedState(ErrorQueue(), ()))


def test_matching_output_and_errors_pass() -> None:
    state = ExecutedState(_compiled(), "(s a)\n", "")

    outcome = evaluate_state(_descriptor(), "Python3", state)

    assert outcome.status is OutcomeStatus.PASSED
    assert outcome.stage_reached is Stage.EXECUTE
    assert outcome.output == "(s a)\n"
    assert outcome.detail is None


def test_output_mismatch_fails_with_both_values() -> None:
    state = ExecutedState(_compiled(), "(s b)\n", "line 1:0 bad\n")

    outcome = evaluate_state(_descriptor(), "Python3", state)

    assert outcome.status is OutcomeStatus.FAILED
    assert "expected output: '(s a)\\n'" in outcome.detail
    assert "actual output: '(s b)\\n'" in outcome.detail
    assert "actual errors: 'line 1:0 bad\\n'" in outcome.detail


def test_generation_errors_are_reported_at_generate_stage() -> None:
    queue = ErrorQueue.of([GenerationMessage(MessageSeverity.ERROR, 50, "syntax error")])
    state = GeneratedState(queue, ())

    outcome = evaluate_state(_descriptor(), "Java", state)

    assert outcome.status is OutcomeStatus.ERROR
    assert outcome.stage_reached is Stage.GENERATE
    assert outcome.backend == "Java"
    assert outcome.detail == "error(50): syntax error"


def test_execution_exception_is_an_error() -> None:
    state = ExecutedState(_compiled(), None, None, OSError("spawn failed"))

    outcome = evaluate_state(_descriptor(), "Python3", state)

    assert outcome.status is OutcomeStatus.ERROR
    assert outcome.detail == "execute: spawn failed"


def test_requested_early_end_stage_passes_when_error_free() -> None:
    outcome = evaluate_state(_descriptor(end_stage=Stage.COMPILE), "Go", _compiled())

    assert outcome.status is OutcomeStatus.PASSED
    assert outcome.stage_reached is Stage.COMPILE
