# feria/models/offer.py
from datetime import datetime

from sqlmodel import Field, SQLModel

from feria.models.common import new_id, utcnow


class Offer(SQLModel, table=True):
    """
    Job offer published by a company.

    company_name and logo_url are copied from the company when the offer is
    created so listings do not need a join.
    """

    __tablename__ = "offers"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)

    company_id: str = Field(index=True)
    company_name: str = Field(index=True)

    position: str
    workplace_type: str | None = Field(default=None, index=True)
    location: str = Field(index=True)
    job_type: str | None = Field(default=None, index=True)
    sector: str | None = Field(default=None, index=True)
    description: str
    link: str

    logo_url: str | None = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
