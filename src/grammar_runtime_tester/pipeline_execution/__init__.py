"""Pipeline execution exports."""

from .pipeline_states import CompiledState, ExecutedState, GeneratedState, PipelineState
from .run_context import RunContext
from .run_options import INPUT_FILE_NAME, GeneratedArtifact, RunOptions, Stage
from .runtime_runner import RuntimeNotInitializedError, RuntimeRunner

__all__ = [
    "CompiledState",
    "ExecutedState",
    "GeneratedArtifact",
    "GeneratedState",
    "INPUT_FILE_NAME",
    "PipelineState",
    "RunContext",
    "RunOptions",
    "RuntimeNotInitializedError",
    "RuntimeRunner",
    "Stage",
]
