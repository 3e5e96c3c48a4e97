"""Render recognizer driver files from packaged jinja2 templates."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import (
    BaseLoader,
    Environment,
    PackageLoader,
    StrictUndefined,
    TemplateNotFound,
    UndefinedError,
)

_TEMPLATE_PACKAGE = "grammar_runtime_tester.scaffold_rendering"


class ScaffoldTemplateError(Exception):
    """Raised when a scaffold template is missing or cannot be rendered."""


class ScaffoldRenderer:  # pylint: disable=too-few-public-methods
    """Resolve `<backend_id>/<file name>.j2` templates and render them."""

    def __init__(self, loader: BaseLoader | None = None) -> None:
        self._environment = Environment(
            loader=loader or PackageLoader(_TEMPLATE_PACKAGE, "templates"),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,
        )

    def render(self, backend_id: str, file_name: str, parameters: Mapping[str, Any]) -> str:
        template_name = f"{backend_id}/{file_name}.j2"
        try:
            template = self._environment.get_template(template_name)
        except TemplateNotFound as exc:
            raise ScaffoldTemplateError(f"Scaffold template not found: {template_name}") from exc
        try:
            return template.render(**parameters)
        except UndefinedError as exc:
            raise ScaffoldTemplateError(
                f"Scaffold template {template_name} references an unknown parameter: {exc}"
            ) from exc
