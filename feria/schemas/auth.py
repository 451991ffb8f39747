# feria/schemas/auth.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Roles a stored account can have.
Role = Literal["admin", "co", "visitor"]

ROLES: tuple[str, ...] = ("admin", "co", "visitor")
ADMIN = "admin"
COMPANY = "co"
VISITOR = "visitor"

# Role assumed for a verified token that carries no role claim.
DEFAULT_ROLE = "user"


class SessionClaims(BaseModel):
    """
    Canonical session-token payload.

    Every issuance site builds this model (see `claims_for_user`), so the
    claim shape cannot drift between login, token login and claim refresh.

    Wire names: designComplete, informationComplete, role.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: str | None = None
    design_complete: bool = Field(default=False, alias="designComplete")
    information_complete: bool = Field(default=False, alias="informationComplete")


class Identity(BaseModel):
    """Request-scoped identity derived from verified claims."""

    id: str
    name: str
    email: str
    role: str = DEFAULT_ROLE

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "Identity":
        return cls(
            id=claims.id,
            name=claims.name,
            email=claims.email,
            role=claims.role or DEFAULT_ROLE,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN


class LoginRequest(BaseModel):
    """Credentials: a user can log in with either their name or their email."""

    model_config = ConfigDict(populate_by_name=True)

    name_or_email: str = Field(alias="nameOrEmail")
    password: str

    @field_validator("name_or_email", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("field cannot be empty")
        return v


class SessionUser(BaseModel):
    """Minimal user summary returned by the login endpoints."""

    id: str
    name: str
    role: str


class LoginResponse(BaseModel):
    message: str
    user: SessionUser


class TokenLoginResponse(LoginResponse):
    token: str
