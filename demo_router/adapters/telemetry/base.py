from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractTelemetryClient(ABC):
    """Interface for best-effort page view tracking."""

    @abstractmethod
    async def capture_page_view(self, path: str, properties: dict[str, Any] | None = None) -> None:
        """Record one page view.

        Implementations may raise on transport failures; callers decide
        whether to swallow them.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources; called on app shutdown."""
        return None


class NullTelemetryClient(AbstractTelemetryClient):
    """Discards every event."""

    async def capture_page_view(self, path: str, properties: dict[str, Any] | None = None) -> None:
        return None
