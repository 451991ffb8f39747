# feria/schemas/media.py
from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel


class VideoUrl(SQLModel):
    model_config = ConfigDict(extra="forbid")

    url: str

    @field_validator("url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url cannot be empty")
        return v


class UrlList(SQLModel):
    """Document holding a company's list of URLs (videos or download files)."""

    id: str
    company_id: str
    urls: list[str] = []
