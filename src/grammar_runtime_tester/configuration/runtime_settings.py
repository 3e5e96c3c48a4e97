"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from grammar_runtime_tester.test_workspace import HarnessPaths


@dataclass(frozen=True)
class GeneratorSettings:
    """Command line used to invoke the grammar tool."""

    command: tuple[str, ...]


@dataclass(frozen=True)
class ProcessSettings:
    """Limits applied to every spawned process."""

    timeout_seconds: int


@dataclass(frozen=True)
class ExecutionSettings:
    """Suite scheduling and workspace retention."""

    parallelism: int
    save_test_dir: bool


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    paths: HarnessPaths
    generator: GeneratorSettings
    process: ProcessSettings
    execution: ExecutionSettings
