# feria/models/design.py
from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from feria.models.common import new_id, utcnow


class Stand(SQLModel, table=True):
    """
    Catalog entry: a booth stand a company can pick.

    Seeded out of band; read-only through the API.
    """

    __tablename__ = "stands"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    name: str
    file_url: str = Field(description="URL of the stand asset")
    config: dict | None = Field(default=None, sa_column=Column(JSON))
    uploaded_at: datetime = Field(default_factory=utcnow)


class BoothModel(SQLModel, table=True):
    """Catalog entry: a 3D model placed on the stand."""

    __tablename__ = "booth_models"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    name: str
    file_url: str = Field(description="URL of the model asset")
    uploaded_at: datetime = Field(default_factory=utcnow)


class DesignFiles(SQLModel, table=True):
    """Banner and poster shown on a company's stand."""

    __tablename__ = "design_files"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True)
    banner_url: str | None = None
    poster_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None


class Design(SQLModel, table=True):
    """
    A company's stand configuration. At most one per company.
    """

    __tablename__ = "designs"

    id: str = Field(default_factory=new_id, primary_key=True, index=True)
    company_id: str = Field(index=True)
    stand_id: str
    model_id: str
    files_id: str = Field(description="design_files.id")
    logo_url: str | None = Field(default=None, description="Company logo at creation time")
    created_at: datetime = Field(default_factory=utcnow)
