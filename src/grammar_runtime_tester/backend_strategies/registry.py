"""Backend identifier to strategy lookup."""

from __future__ import annotations

from collections.abc import Iterable

from .backend_contract import BackendStrategy
from .go_backend import GoBackend
from .java_backend import JavaBackend
from .javascript_backend import JavaScriptBackend
from .python_backend import Python3Backend


class UnknownBackendError(Exception):
    """Raised when no backend is registered under the requested identifier."""


class BackendRegistry:
    """Table of registered backends keyed by identifier."""

    def __init__(self, backends: Iterable[BackendStrategy] = ()) -> None:
        self._backends: dict[str, BackendStrategy] = {}
        for backend in backends:
            self.register(backend)

    def register(self, backend: BackendStrategy) -> None:
        if backend.identifier in self._backends:
            raise ValueError(f"Backend '{backend.identifier}' is already registered.")
        self._backends[backend.identifier] = backend

    def get(self, identifier: str) -> BackendStrategy:
        try:
            return self._backends[identifier]
        except KeyError as exc:
            known = ", ".join(self.identifiers()) or "none"
            raise UnknownBackendError(
                f"Unknown backend '{identifier}'. Registered backends: {known}."
            ) from exc

    def identifiers(self) -> tuple[str, ...]:
        return tuple(sorted(self._backends))

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._backends


def default_registry() -> BackendRegistry:
    return BackendRegistry([Python3Backend(), JavaScriptBackend(), GoBackend(), JavaBackend()])
