"""Process-wide filesystem roots and per-backend path derivation."""

from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

CACHE_DIRECTORY_NAME = "grammar-runtime-tester-cache"


def _default_temp_root() -> Path:
    return Path(tempfile.gettempdir())


def _default_cache_root() -> Path:
    return Path(tempfile.gettempdir()) / CACHE_DIRECTORY_NAME


def _default_build_output_root() -> Path:
    return Path("target", "classes").resolve()


@dataclass(frozen=True)
class HarnessPaths:
    """Roots shared by every run in the process."""

    temp_root: Path = field(default_factory=_default_temp_root)
    cache_root: Path = field(default_factory=_default_cache_root)
    build_output_root: Path = field(default_factory=_default_build_output_root)

    def cache_path(self, backend_id: str) -> Path:
        return self.cache_root / backend_id

    def runtime_path(self, backend_id: str) -> Path:
        return self.build_output_root / backend_id
