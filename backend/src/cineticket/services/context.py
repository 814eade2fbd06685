"""Per-request identity passed explicitly into booking operations."""

from dataclasses import dataclass

from cineticket.errors import AuthenticationError


@dataclass(frozen=True)
class RequestContext:
    user_id: int


def require_context(ctx: RequestContext | None) -> RequestContext:
    """Return the context or fail when no user is acting."""
    if ctx is None:
        raise AuthenticationError("No authenticated user for this request")
    return ctx
