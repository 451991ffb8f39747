# feria/models/user.py
from datetime import datetime

from sqlmodel import Field, SQLModel

from feria.models.common import new_id, utcnow


class User(SQLModel, table=True):
    """
    Account + profile for the fair platform.

    Role:
      - "admin" | "co" (company) | "visitor"

    Company-only fields: tax_id, design_complete, information_complete.
    Visitor-only fields: dni, subname, studies, phone, image_url, cv_url.
    Both companies and visitors may own a logo (see Logo).

    name and email are unique: checked before insert and backed by unique
    indexes so concurrent registrations cannot both succeed.
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)

    name: str = Field(unique=True, index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)

    password_hash: str = Field(description="bcrypt hash, salt embedded")

    role: str = Field(index=True, description="Application role: admin | co | visitor")

    # Profile-completion flags (companies)
    design_complete: bool = Field(default=False)
    information_complete: bool = Field(default=False)

    # Company fields
    tax_id: str | None = Field(default=None, description="Company CIF")

    # Visitor fields
    dni: str | None = Field(default=None, description="National id")
    subname: str | None = None
    studies: str | None = None
    phone: str | None = None
    image_url: str | None = Field(default=None, description="Profile image URL")
    cv_url: str | None = None

    logo_id: str | None = Field(default=None, description="Id of the Logo row")

    created_at: datetime = Field(
        default_factory=utcnow,
        description="Creation timestamp (UTC)",
    )


class Logo(SQLModel, table=True):
    """Uploaded logo of an account, stored in the media bucket."""

    __tablename__ = "logos"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)

    company_id: str = Field(index=True, description="Owner users.id")

    url: str = Field(description="Public storage URL")

    uploaded_at: datetime = Field(default_factory=utcnow)
