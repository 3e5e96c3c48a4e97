"""Grammar tool invocation producing generated recognizer artifacts."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from grammar_runtime_tester.process_running import ProcessRunError, ProcessRunner

from .generation_messages import ErrorQueue, GenerationMessage, MessageSeverity

logger = logging.getLogger(__name__)

_MESSAGE_PATTERN = re.compile(
    r"^(?P<severity>error|warning)(?:\((?P<code>\d+)\))?:\s*(?P<text>.*)$"
)


class ArtifactGenerator(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for collaborators that turn grammar text into source artifacts."""

    def generate(
        self,
        work_dir: Path,
        backend_id: str,
        grammar_file_name: str,
        grammar_text: str,
        generate_only: bool,
        extra_options: Sequence[str],
    ) -> ErrorQueue: ...


class ToolArtifactGenerator:  # pylint: disable=too-few-public-methods
    """Run the external grammar tool and collect its diagnostics."""

    def __init__(self, command: Sequence[str], process_runner: ProcessRunner) -> None:
        if not command:
            raise ValueError("Generator command must not be empty.")
        self._command = tuple(command)
        self._process_runner = process_runner

    # pylint: disable=too-many-arguments
    def generate(
        self,
        work_dir: Path,
        backend_id: str,
        grammar_file_name: str,
        grammar_text: str,
        generate_only: bool,
        extra_options: Sequence[str],
    ) -> ErrorQueue:
        work_dir.mkdir(parents=True, exist_ok=True)
        (work_dir / grammar_file_name).write_text(grammar_text, encoding="utf-8")
        args = [
            *self._command,
            f"-Dlanguage={backend_id}",
            "-o",
            str(work_dir),
            "-lib",
            str(work_dir),
            "-encoding",
            "UTF-8",
            *extra_options,
            grammar_file_name,
        ]
        try:
            result = self._process_runner.run(args, work_dir)
        except ProcessRunError as exc:
            return ErrorQueue.of(
                [GenerationMessage(MessageSeverity.ERROR, None, f"can't generate: {exc}")]
            )

        messages = parse_tool_messages(result.errors) + parse_tool_messages(result.output)
        if not generate_only:
            for message in messages:
                logger.info("%s: %s", grammar_file_name, message.render())
        if result.exit_code != 0 and not any(
            message.severity == MessageSeverity.ERROR for message in messages
        ):
            detail = result.errors.strip() or result.output.strip()
            messages.append(
                GenerationMessage(
                    MessageSeverity.ERROR,
                    None,
                    f"generator exited with code {result.exit_code}: {detail}",
                )
            )
        return ErrorQueue.of(messages)

    # pylint: enable=too-many-arguments


def parse_tool_messages(text: str) -> list[GenerationMessage]:
    """Extract `error(NNN): ...` and `warning(NNN): ...` lines from tool output."""
    messages: list[GenerationMessage] = []
    for line in text.splitlines():
        match = _MESSAGE_PATTERN.match(line.strip())
        if match is None:
            continue
        code = match.group("code")
        messages.append(
            GenerationMessage(
                severity=MessageSeverity(match.group("severity")),
                code=int(code) if code else None,
                text=match.group("text"),
            )
        )
    return messages
