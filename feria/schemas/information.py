# feria/schemas/information.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlmodel import SQLModel


class InfoLink(BaseModel):
    """Extra call-to-action button shown on the company page."""

    model_config = ConfigDict(populate_by_name=True)

    additional_button_title: str = Field(alias="additionalButtonTitle", min_length=1)
    additional_button_link: str = Field(alias="additionalButtonLink", min_length=1)


class InfoDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    url: str


class InformationUpdate(SQLModel):
    """
    Replace the editable text of a company page.

    Omitted optional fields are reset (additional_information -> "",
    links -> [], sector -> None).
    """

    model_config = ConfigDict(extra="forbid")

    description: str
    additional_information: str | None = None
    links: list[InfoLink] | None = None
    sector: str | None = None

    @field_validator("description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description cannot be empty")
        return v


class DocumentsKeep(SQLModel):
    """Documents to keep; every other stored document is deleted."""

    model_config = ConfigDict(extra="forbid")

    documents_to_keep: list[InfoDocument]


class InformationRead(SQLModel):
    id: str
    company_id: str
    description: str
    additional_information: str = ""
    sector: str | None = None
    links: list[dict] = []
    documents: list[dict] = []
    updated_at: datetime | None = None


class EventCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    name_date: str
    link_event: str
    description: str

    @field_validator("name_date", "link_event", "description")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v
