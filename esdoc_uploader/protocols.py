"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator only talks to these, so tests can hand it fakes.
"""
from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class IAPIClient(Protocol):
    """Interface for the documentation API gateway."""

    async def post_json(self, path: str, body: Dict[str, Any]) -> Any:
        """POST a JSON body, returning an APIResponse."""
        ...

    async def get_raw(self, path: str) -> Any:
        """GET a path, returning an APIResponse."""
        ...


@runtime_checkable
class IReporter(Protocol):
    """Interface for the diagnostic channel."""

    def error(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...


@runtime_checkable
class IProgressIndicator(Protocol):
    """Interface for the terminal progress animation."""

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...
