"""Test workspace exports."""

from .harness_paths import CACHE_DIRECTORY_NAME, HarnessPaths
from .test_directory import TestDirectory

__all__ = ["CACHE_DIRECTORY_NAME", "HarnessPaths", "TestDirectory"]
