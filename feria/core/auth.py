# feria/core/auth.py
from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from feria.core.config import get_settings
from feria.core.errors import AuthenticationError, AuthorizationError, ValidationError
from feria.core.security import TokenService, get_token_service
from feria.schemas.auth import VISITOR, Identity

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does NOT raise here,
#   so we can fall back to the session cookie.
bearer_scheme = HTTPBearer(auto_error=False)

NO_TOKEN = "No token provided"
INVALID_TOKEN = "Invalid or expired token"
INSUFFICIENT_PERMISSIONS = "Access denied: insufficient permissions"


# -------- Session carrier --------


def extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> str | None:
    """
    Pick the session token for this request.

    Precedence:
      1. `Authorization: Bearer <token>` (non-browser clients, e.g. the
         Unity stand viewer, cannot manage cookies)
      2. the session cookie
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def set_session_cookie(response: Response, token: str) -> None:
    """Store the token in the HttpOnly session cookie (same policy everywhere)."""
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_session_cookie(response: Response) -> None:
    """
    Drop the session cookie.

    Tokens are stateless: a copy held elsewhere stays valid until it expires.
    """
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
    )


# -------- Authorization guard --------


def _authenticate(request: Request, token: str | None, tokens: TokenService) -> Identity:
    if not token:
        raise AuthenticationError(NO_TOKEN)

    claims = tokens.verify(token)
    if claims is None:
        raise AuthenticationError(INVALID_TOKEN)

    identity = Identity.from_claims(claims)
    request.state.identity = identity
    return identity


def require_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Enforce authentication (any role).

    Reads the token from the Bearer header, else from the cookie.

    Raises:
        AuthenticationError(401): token missing, invalid or expired.
    """
    return _authenticate(request, extract_token(request, credentials), tokens)


def require_role(required_role: str):
    """
    Build a dependency that only admits tokens whose role equals `required_role`.

    This variant only reads the session cookie.

    Raises:
        AuthenticationError(401): token missing, invalid or expired.
        AuthorizationError(403): role mismatch.
    """

    def dependency(
        request: Request,
        tokens: TokenService = Depends(get_token_service),
    ) -> Identity:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
        identity = _authenticate(request, token, tokens)
        if identity.role != required_role:
            raise AuthorizationError(INSUFFICIENT_PERMISSIONS)
        return identity

    return dependency


def deny_role(role: str, message: str):
    """
    Build a dependency that admits any authenticated caller except `role`.

    Raises:
        AuthenticationError(401): token missing, invalid or expired.
        AuthorizationError(403): caller has `role`.
    """

    def dependency(identity: Identity = Depends(require_identity)) -> Identity:
        if identity.role == role:
            raise AuthorizationError(f"Access denied: {message}")
        return identity

    return dependency


# -------- Effective subject id --------


class SubjectPolicy(str, Enum):
    """
    Which account a request operates on.

    ADMIN_OVERRIDE: admins act on the route id, everyone else on themselves.
    SELF_OR_PUBLIC: the route id when given, else the caller.
    """

    ADMIN_OVERRIDE = "admin-override"
    SELF_OR_PUBLIC = "self-or-public"


@dataclass(frozen=True)
class Subject:
    """The resolved resource owner plus the caller acting on it."""

    id: str
    identity: Identity

    @property
    def is_self(self) -> bool:
        return self.id == self.identity.id


def resolve_subject_id(
    identity: Identity,
    route_id: str | None,
    policy: SubjectPolicy,
) -> str:
    if policy is SubjectPolicy.ADMIN_OVERRIDE:
        if not identity.is_admin:
            return identity.id
        if not route_id:
            raise ValidationError(
                "missing_id",
                "An account id is required when acting as administrator.",
            )
        return route_id
    return route_id or identity.id


def subject(
    policy: SubjectPolicy,
    deny_visitor: str | None = None,
    param: str = "company_id",
):
    """
    Build a dependency resolving the effective subject of a route.

    Args:
        policy: resolution policy for this route.
        deny_visitor: if set, visitors get 403 with this message before any
            id is resolved.
        param: name of the optional path parameter carrying the target id.
    """
    gate = deny_role(VISITOR, deny_visitor) if deny_visitor else require_identity

    def dependency(
        request: Request,
        identity: Identity = Depends(gate),
    ) -> Subject:
        route_id = request.path_params.get(param)
        return Subject(
            id=resolve_subject_id(identity, route_id, policy),
            identity=identity,
        )

    return dependency


def ensure_self_or_admin(identity: Identity, target_id: str) -> None:
    """Only the account itself or an admin may modify an account."""
    if identity.id != target_id and not identity.is_admin:
        raise AuthorizationError("Access denied")
