"""Scaffold rendering exports."""

from .scaffold_renderer import ScaffoldRenderer, ScaffoldTemplateError

__all__ = ["ScaffoldRenderer", "ScaffoldTemplateError"]
