"""Configuration loader service."""

from __future__ import annotations

import shlex
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from grammar_runtime_tester.test_workspace import HarnessPaths

from .runtime_settings import (
    Configuration,
    ExecutionSettings,
    GeneratorSettings,
    ProcessSettings,
)

DEFAULT_TIMEOUT_SECONDS = 300
DEFAULT_PARALLELISM = 4
_OPTIONAL_PLACEHOLDER = "<OPTIONAL>"
_REQUIRED_PLACEHOLDER = "<REQUIRED>"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    return Configuration(
        path=path,
        paths=_parse_paths_section(parsed.get("paths"), base_path),
        generator=_parse_generator_section(parsed.get("generator")),
        process=_parse_process_section(parsed.get("process")),
        execution=_parse_execution_section(parsed.get("execution")),
    )


def _parse_paths_section(value: Any, base_path: Path) -> HarnessPaths:
    section = _optional_mapping(value, "paths")
    defaults = HarnessPaths()
    return HarnessPaths(
        temp_root=_optional_path(section.get("temp_root"), "paths.temp_root", base_path)
        or defaults.temp_root,
        cache_root=_optional_path(section.get("cache_root"), "paths.cache_root", base_path)
        or defaults.cache_root,
        build_output_root=_optional_path(
            section.get("build_output_root"), "paths.build_output_root", base_path
        )
        or defaults.build_output_root,
    )


def _parse_generator_section(value: Any) -> GeneratorSettings:
    section = _require_mapping(value, "generator")
    return GeneratorSettings(command=_normalize_command(section.get("command")))


def _parse_process_section(value: Any) -> ProcessSettings:
    section = _optional_mapping(value, "process")
    timeout_seconds = _require_positive_int(
        section.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), "process.timeout_seconds"
    )
    return ProcessSettings(timeout_seconds=timeout_seconds)


def _parse_execution_section(value: Any) -> ExecutionSettings:
    section = _optional_mapping(value, "execution")
    parallelism = _require_positive_int(
        section.get("parallelism", DEFAULT_PARALLELISM), "execution.parallelism"
    )
    save_test_dir = section.get("save_test_dir", False)
    if not isinstance(save_test_dir, bool):
        raise ConfigurationError("execution.save_test_dir must be a boolean.")
    return ExecutionSettings(parallelism=parallelism, save_test_dir=save_test_dir)


def _normalize_command(value: Any) -> tuple[str, ...]:
    if value is None:
        raise ConfigurationError("generator.command is required.")
    parts: list[str] = []
    if isinstance(value, str):
        parts = shlex.split(value)
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError("generator.command entries must be strings.")
            stripped = item.strip()
            if stripped:
                parts.append(stripped)
    else:
        raise ConfigurationError("generator.command must be a string or list of strings.")
    if not parts:
        raise ConfigurationError("generator.command must not be empty.")
    if _REQUIRED_PLACEHOLDER in parts:
        raise ConfigurationError("generator.command still contains a <REQUIRED> placeholder.")
    return tuple(parts)


def _optional_path(value: Any, field_name: str, base_path: Path) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped or stripped == _OPTIONAL_PLACEHOLDER:
        return None
    return _resolve_path(base_path, stripped)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path).expanduser()
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
