"""Immutable stage results forming the audit trail of one run.

Every state keeps a reference to the state of the previous stage, so the
state returned by a run always carries the complete history up to the stage
where the pipeline stopped.
"""

from __future__ import annotations

from dataclasses import dataclass

from grammar_runtime_tester.artifact_generation import ErrorQueue

from .run_options import GeneratedArtifact, Stage


class PipelineState:
    """Behaviour shared by the Generated, Compiled and Executed states."""

    stage: Stage
    exception: Exception | None

    @property
    def previous_state(self) -> PipelineState | None:
        return None

    def contains_errors(self) -> bool:
        previous = self.previous_state
        if previous is not None and previous.contains_errors():
            return True
        return self._has_own_errors()

    def error_message(self) -> str:
        messages = [state._own_error_message() for state in self.chain()]
        return "\n".join(message for message in messages if message)

    def chain(self) -> tuple[PipelineState, ...]:
        """States from Generate up to and including this one."""
        previous = self.previous_state
        history = previous.chain() if previous is not None else ()
        return (*history, self)

    def _has_own_errors(self) -> bool:
        return self.exception is not None

    def _own_error_message(self) -> str:
        if self.exception is None:
            return ""
        return f"{self.stage.name.lower()}: {self.exception}"


@dataclass(frozen=True)
class GeneratedState(PipelineState):
    """Result of artifact generation."""

    error_queue: ErrorQueue
    artifacts: tuple[GeneratedArtifact, ...]
    exception: Exception | None = None

    stage = Stage.GENERATE

    def _has_own_errors(self) -> bool:
        return self.error_queue.contains_errors() or self.exception is not None

    def _own_error_message(self) -> str:
        parts = [message.render() for message in self.error_queue.errors]
        if self.exception is not None:
            parts.append(f"generate: {self.exception}")
        return "\n".join(parts)


@dataclass(frozen=True)
class CompiledState(PipelineState):
    """Result of the compile stage, wrapping the generation result."""

    generated_state: GeneratedState
    exception: Exception | None = None

    stage = Stage.COMPILE

    @property
    def previous_state(self) -> GeneratedState:
        return self.generated_state


@dataclass(frozen=True)
class ExecutedState(PipelineState):
    """Captured program output, wrapping the compile result."""

    compiled_state: CompiledState
    output: str | None
    errors: str | None
    exception: Exception | None = None

    stage = Stage.EXECUTE

    @property
    def previous_state(self) -> CompiledState:
        return self.compiled_state
