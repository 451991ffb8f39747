# feria/schemas/user.py
from datetime import datetime

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import Field, SQLModel

from feria.schemas.auth import Role


class UserRegister(SQLModel):
    """
    Registration payload (sent as multipart form next to the optional
    logo / profile image / cv uploads).

    `role` stays a plain string so an unknown role is reported as
    `invalid_role` rather than a generic validation error.
    """

    name: str
    email: str
    password: str
    role: str

    # Company
    tax_id: str | None = None

    # Visitor
    dni: str | None = None
    subname: str | None = None
    studies: str | None = None
    phone: str | None = None


class UserRead(SQLModel):
    """
    Response schema returned to clients (never includes the password hash).

    `logo_url` is resolved from the logos table.
    """

    id: str
    name: str
    email: str
    role: str
    design_complete: bool = False
    information_complete: bool = False
    tax_id: str | None = None
    dni: str | None = None
    subname: str | None = None
    studies: str | None = None
    phone: str | None = None
    image_url: str | None = None
    cv_url: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None


class UserUpdate(SQLModel):
    """
    Partial update. Only provided fields are changed.

    Rules enforced by the service:
      - role can only be changed by an admin
      - role "co" needs tax_id, role "visitor" needs dni + studies
      - name / email must stay unique
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=1)
    role: Role | None = None
    tax_id: str | None = None
    dni: str | None = None
    subname: str | None = None
    studies: str | None = None
    phone: str | None = None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CompanyOverview(SQLModel):
    """One company with everything shown on its stand (admin aggregate)."""

    user: UserRead
    logo: dict | None = None
    offers: list[dict] = []
    videos: list[str] = []
    information: dict | None = None
    design: dict | None = None
