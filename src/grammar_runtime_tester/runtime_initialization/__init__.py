"""Runtime initialization exports."""

from .initialization_cache import (
    DEFAULT_INITIALIZATION_CACHE,
    InitializationCache,
    InitializationStatus,
    ReadinessState,
)

__all__ = [
    "DEFAULT_INITIALIZATION_CACHE",
    "InitializationCache",
    "InitializationStatus",
    "ReadinessState",
]
