# feria/models/company.py
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from feria.models.common import new_id


class CompanyInformation(SQLModel, table=True):
    """
    Informational page of a company. At most one per company.

    links:     [{"additionalButtonTitle": ..., "additionalButtonLink": ...}]
    documents: [{"fileName": ..., "url": ...}]
    """

    __tablename__ = "company_information"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True)
    description: str
    additional_information: str = ""
    sector: str | None = None
    links: list[dict] = Field(default_factory=list, sa_column=Column(JSON))
    documents: list[dict] = Field(default_factory=list, sa_column=Column(JSON))
    updated_at: datetime | None = None


class EventLinks(SQLModel, table=True):
    """
    Calendar events published by a company.

    events: [{"name_date": ..., "link_event": ..., "description": ...}]
    """

    __tablename__ = "event_links"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True, unique=True)
    events: list[dict] = Field(default_factory=list, sa_column=Column(JSON))


class DownloadFiles(SQLModel, table=True):
    """Downloadable files (brochures, ...) offered on a company's stand."""

    __tablename__ = "download_files"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True)
    urls: list[str] = Field(default_factory=list, sa_column=Column(JSON))


class Video(SQLModel, table=True):
    """Video URLs played on a company's stand."""

    __tablename__ = "videos"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True)
    urls: list[str] = Field(default_factory=list, sa_column=Column(JSON))
