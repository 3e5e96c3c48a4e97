"""Artifact generation exports."""

from .generation_messages import ErrorQueue, GenerationMessage, MessageSeverity
from .tool_generator import ArtifactGenerator, ToolArtifactGenerator, parse_tool_messages

__all__ = [
    "ArtifactGenerator",
    "ErrorQueue",
    "GenerationMessage",
    "MessageSeverity",
    "ToolArtifactGenerator",
    "parse_tool_messages",
]
