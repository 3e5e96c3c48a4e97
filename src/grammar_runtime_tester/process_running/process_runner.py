"""Subprocess runner used by generation, compilation and execution."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ProcessRunError(Exception):
    """Raised when a process cannot be spawned or does not finish in time."""


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of one finished process."""

    output: str
    errors: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:  # pylint: disable=too-few-public-methods
    """Run commands in a working directory and capture their text output."""

    def __init__(self, *, timeout_seconds: int | None = None) -> None:
        self._timeout_seconds = timeout_seconds

    def run(
        self,
        args: Sequence[str],
        work_dir: Path | str,
        environment: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        command = [str(arg) for arg in args]
        command_text = shlex.join(command)
        env = None
        if environment:
            env = dict(os.environ)
            env.update(environment)
        logger.debug("running %s in %s", command_text, work_dir)
        try:
            completed = subprocess.run(
                command,
                cwd=Path(work_dir),
                env=env,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ProcessRunError(f"Command not found: {command_text}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ProcessRunError(
                f"Command timed out after {self._timeout_seconds} seconds: {command_text}"
            ) from exc
        except OSError as exc:
            raise ProcessRunError(f"Command failed to start: {command_text}: {exc}") from exc
        return ProcessResult(
            output=completed.stdout or "",
            errors=completed.stderr or "",
            exit_code=completed.returncode,
        )
