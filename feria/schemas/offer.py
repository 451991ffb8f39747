# feria/schemas/offer.py
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


class OfferCreate(SQLModel):
    """
    Payload for publishing an offer.

    position, location, description and link are required.
    """

    model_config = ConfigDict(extra="forbid")

    position: str
    location: str
    description: str
    link: str
    workplace_type: str | None = None
    job_type: str | None = None
    sector: str | None = None

    @field_validator("position", "location", "description", "link")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class OfferUpdate(SQLModel):
    """Partial update; the link and the owning company cannot change."""

    model_config = ConfigDict(extra="forbid")

    position: str | None = None
    workplace_type: str | None = None
    location: str | None = None
    job_type: str | None = None
    description: str | None = None
    sector: str | None = None


class OfferRead(SQLModel):
    id: str
    company_id: str
    company_name: str
    position: str
    workplace_type: str | None = None
    location: str
    job_type: str | None = None
    sector: str | None = None
    description: str
    link: str
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
