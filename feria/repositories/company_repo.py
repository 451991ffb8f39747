# feria/repositories/company_repo.py
from sqlmodel import Session, select

from feria.models.company import CompanyInformation, DownloadFiles, EventLinks, Video


class CompanyRepository:
    """
    Data access layer for the per-company documents: information page,
    calendar events, download files and videos.

    Each of them is looked up by `company_id` (equality filter).
    """

    def get_information(self, session: Session, company_id: str) -> CompanyInformation | None:
        stmt = select(CompanyInformation).where(CompanyInformation.company_id == company_id)
        return session.exec(stmt).first()

    def get_events(self, session: Session, company_id: str) -> EventLinks | None:
        stmt = select(EventLinks).where(EventLinks.company_id == company_id)
        return session.exec(stmt).first()

    def get_download_files(self, session: Session, company_id: str) -> DownloadFiles | None:
        stmt = select(DownloadFiles).where(DownloadFiles.company_id == company_id)
        return session.exec(stmt).first()

    def get_video(self, session: Session, company_id: str) -> Video | None:
        stmt = select(Video).where(Video.company_id == company_id)
        return session.exec(stmt).first()

    def save(self, session: Session, document):
        """Insert or update any of the documents above."""
        session.add(document)
        session.commit()
        session.refresh(document)
        return document
