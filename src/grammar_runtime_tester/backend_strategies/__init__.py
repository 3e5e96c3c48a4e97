"""Backend strategy exports."""

from .backend_contract import ArtifactSuffixes, BackendCommandError, BackendStrategy
from .go_backend import GoBackend
from .java_backend import JavaBackend
from .javascript_backend import JavaScriptBackend
from .python_backend import Python3Backend
from .registry import BackendRegistry, UnknownBackendError, default_registry

__all__ = [
    "ArtifactSuffixes",
    "BackendCommandError",
    "BackendRegistry",
    "BackendStrategy",
    "GoBackend",
    "JavaBackend",
    "JavaScriptBackend",
    "Python3Backend",
    "UnknownBackendError",
    "default_registry",
]
