"""Upstream client interface shared by every managed kind."""

from __future__ import annotations

from typing import Any, Protocol

from ...utils.context import ReconcileContext


class UpstreamClient(Protocol):
    """Protocol defining the per-kind Cloudflare operations.

    Implementations raise NotFoundError when the object is absent,
    RateLimitedError when throttled and UpstreamError for anything else.
    """

    def create(self, ctx: ReconcileContext, params: Any) -> Any:
        """Create the object and return its observation."""
        ...

    def get(self, ctx: ReconcileContext, external_id: str, params: Any) -> Any:
        """Fetch the current observation of an existing object."""
        ...

    def update(self, ctx: ReconcileContext, external_id: str, params: Any) -> Any:
        """Replace the object's configuration with params."""
        ...

    def delete(self, ctx: ReconcileContext, external_id: str, params: Any) -> None:
        """Delete the object."""
        ...

    def list(self, ctx: ReconcileContext, params: Any) -> list[Any]:
        """List objects in the same scope as params."""
        ...
