# feria/schemas/design.py
from datetime import datetime

from sqlmodel import SQLModel


class StandRead(SQLModel):
    id: str
    name: str
    file_url: str
    config: dict | None = None


class BoothModelRead(SQLModel):
    id: str
    name: str
    file_url: str


class DesignFilesRead(SQLModel):
    id: str
    banner_url: str | None = None
    poster_url: str | None = None


class DesignRead(SQLModel):
    id: str
    company_id: str
    stand_id: str
    model_id: str
    logo_url: str | None = None
    created_at: datetime | None = None


class DesignDetail(SQLModel):
    """A design with its stand, model and files resolved."""

    design: DesignRead
    stand: StandRead | None = None
    model: BoothModelRead | None = None
    files: DesignFilesRead | None = None
