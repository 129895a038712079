"""Authentication and ownership checks shared by every operation handler."""

from postfeed.errors import ApiError
from postfeed.schemas.auth import AuthPrincipal, RequestContext


def require_authenticated(context: RequestContext, *, message: str = "Not authenticated!") -> AuthPrincipal:
    if context.principal is None:
        raise ApiError(status_code=401, code="UNAUTHENTICATED", message=message)
    return context.principal


def require_owner(context: RequestContext, resource_owner_id: object, *, message: str) -> None:
    """Reject callers whose identifier differs from the resource owner's.

    Both sides are compared in canonical string form so an id held as a
    non-string value cannot slip past a type mismatch.
    """
    principal = require_authenticated(context)
    if str(principal.principal_id) != str(resource_owner_id):
        raise ApiError(status_code=403, code="FORBIDDEN", message=message)


__all__ = ["require_authenticated", "require_owner"]
