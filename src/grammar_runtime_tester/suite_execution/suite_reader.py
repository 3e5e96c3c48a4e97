"""Suite file ingestion and validation service."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from grammar_runtime_tester.pipeline_execution.run_options import Stage

from .suite_models import RuntimeTestDescriptor

_GRAMMAR_HEADER = re.compile(r"^\s*(?:(?P<kind>lexer|parser)\s+)?grammar\s+(?P<name>\w+)\s*;", re.M)


class SuiteValidationError(Exception):
    """Raised when a suite file is invalid."""


def read_suite(suite_path: Path | str) -> tuple[RuntimeTestDescriptor, ...]:
    """Read the YAML suite file and return normalized test descriptors."""
    path = Path(suite_path)
    if not path.exists():
        raise SuiteValidationError(f"Suite file not found: {path}")
    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SuiteValidationError(f"Failed to parse suite file: {exc}") from exc
    if not isinstance(parsed, Mapping):
        raise SuiteValidationError("Suite root must be a mapping.")
    entries = parsed.get("tests")
    if not isinstance(entries, Sequence) or isinstance(entries, str) or not entries:
        raise SuiteValidationError("Suite must define a non-empty 'tests' list.")

    descriptors: list[RuntimeTestDescriptor] = []
    seen_names: set[str] = set()
    for index, entry in enumerate(entries, start=1):
        descriptor = parse_descriptor(entry, f"tests[{index}]")
        if descriptor.name in seen_names:
            raise SuiteValidationError(f"Duplicate test name: {descriptor.name}")
        seen_names.add(descriptor.name)
        descriptors.append(descriptor)
    return tuple(descriptors)


def parse_descriptor(entry: Any, label: str) -> RuntimeTestDescriptor:
    """Validate one `tests` entry into a descriptor."""
    if not isinstance(entry, Mapping):
        raise SuiteValidationError(f"{label} must be a mapping.")
    name = _require_non_empty_string(entry.get("name"), f"{label}.name")
    label = f"tests[{name}]"
    grammar = _require_non_empty_string(entry.get("grammar"), f"{label}.grammar")
    grammar_name, lexer_name, parser_name = _resolve_recognizer_names(entry, grammar, label)
    return RuntimeTestDescriptor(
        name=name,
        backends=_normalize_string_sequence(entry.get("backends"), f"{label}.backends"),
        grammar_name=grammar_name,
        grammar=grammar,
        lexer_name=lexer_name,
        parser_name=parser_name,
        start_rule=_optional_string(entry.get("start_rule"), f"{label}.start_rule"),
        input=_optional_text(entry.get("input"), f"{label}.input"),
        output=_optional_text(entry.get("output"), f"{label}.output"),
        errors=_optional_text(entry.get("errors"), f"{label}.errors"),
        use_listener=_optional_bool(entry.get("use_listener"), f"{label}.use_listener"),
        use_visitor=_optional_bool(entry.get("use_visitor"), f"{label}.use_visitor"),
        super_class=_optional_string(entry.get("super_class"), f"{label}.super_class"),
        show_diagnostic_errors=_optional_bool(
            entry.get("show_diagnostic_errors"), f"{label}.show_diagnostic_errors"
        ),
        profile=_optional_bool(entry.get("profile"), f"{label}.profile"),
        show_dfa=_optional_bool(entry.get("show_dfa"), f"{label}.show_dfa"),
        end_stage=_parse_end_stage(entry.get("end_stage"), f"{label}.end_stage"),
        enabled=_optional_bool(entry.get("enabled", True), f"{label}.enabled"),
        skip_backends=frozenset(
            _normalize_string_sequence(entry.get("skip", ()), f"{label}.skip", allow_empty=True)
        ),
    )


def _resolve_recognizer_names(
    entry: Mapping[str, Any], grammar: str, label: str
) -> tuple[str, str | None, str | None]:
    header = _GRAMMAR_HEADER.search(grammar)
    declared_name = _optional_string(entry.get("grammar_name"), f"{label}.grammar_name")
    if declared_name is not None:
        grammar_name = declared_name
    elif header is not None:
        grammar_name = header.group("name")
    else:
        raise SuiteValidationError(
            f"{label}.grammar_name is required when the grammar has no header."
        )
    kind = header.group("kind") if header else None

    default_lexer: str | None = f"{grammar_name}Lexer"
    default_parser: str | None = f"{grammar_name}Parser"
    if kind == "lexer":
        default_lexer, default_parser = grammar_name, None
    elif kind == "parser":
        default_lexer, default_parser = None, grammar_name

    lexer_name = _optional_string(entry.get("lexer_name"), f"{label}.lexer_name")
    parser_name = _optional_string(entry.get("parser_name"), f"{label}.parser_name")
    return (
        grammar_name,
        lexer_name if "lexer_name" in entry else default_lexer,
        parser_name if "parser_name" in entry else default_parser,
    )


def _parse_end_stage(value: Any, field_name: str) -> Stage:
    if value is None:
        return Stage.EXECUTE
    if not isinstance(value, str):
        raise SuiteValidationError(f"{field_name} must be a string.")
    try:
        return Stage.parse(value)
    except ValueError as exc:
        raise SuiteValidationError(f"{field_name}: {exc}") from exc


def _normalize_string_sequence(
    value: Any, field_name: str, *, allow_empty: bool = False
) -> tuple[str, ...]:
    items: list[str] = []
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",") if item.strip()]
    elif isinstance(value, Sequence):
        for item in value:
            if not isinstance(item, str):
                raise SuiteValidationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                items.append(stripped)
    elif value is not None:
        raise SuiteValidationError(f"{field_name} must be a string or list of strings.")
    if not items and not allow_empty:
        raise SuiteValidationError(f"{field_name} must contain at least one entry.")
    return tuple(dict.fromkeys(items))


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise SuiteValidationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise SuiteValidationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SuiteValidationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_text(value: Any, field_name: str) -> str:
    """Keep text verbatim; input and expected output are compared byte for byte."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SuiteValidationError(f"{field_name} must be a string.")
    return value


def _optional_bool(value: Any, field_name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise SuiteValidationError(f"{field_name} must be a boolean.")
    return value
