# feria/services/media_service.py
import logging

from sqlmodel import Session

from feria.core.errors import ConflictError, NotFoundError
from feria.core.storage import StorageService, UploadedFile
from feria.models.company import DownloadFiles, Video
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.user_repo import UserRepository
from feria.services.user_service import require_company

logger = logging.getLogger(__name__)


class MediaService:
    """
    Download files and videos shown on a company's stand.

    Both are a single per-company document holding a list of URLs. Adding
    returns `created=True` when the document did not exist yet.
    """

    def __init__(self, repo: CompanyRepository, users: UserRepository):
        self.repo = repo
        self.users = users

    # ----- Download files -----

    def add_download_file(
        self,
        session: Session,
        storage: StorageService,
        company_id: str,
        file: UploadedFile,
    ) -> tuple[DownloadFiles, bool]:
        """
        Upload a file and append its URL to the company's list.

        Every upload gets a fresh object name, so sending the same file twice
        lists it twice.

        Raises:
            NotFoundError(404): unknown company.
        """
        require_company(session, self.users, company_id)
        doc = self.repo.get_download_files(session, company_id)
        created = doc is None
        if created:
            doc = DownloadFiles(company_id=company_id, urls=[])

        url = storage.upload(file, "downloadFiles").url
        doc.urls = [*doc.urls, url]
        doc = self.repo.save(session, doc)
        logger.info("Download file added for company %s", company_id)
        return doc, created

    def get_download_files(self, session: Session, company_id: str) -> DownloadFiles:
        doc = self.repo.get_download_files(session, company_id)
        if doc is None:
            raise NotFoundError("files_not_found", "No files found for this company")
        return doc

    # ----- Videos -----

    def add_video(self, session: Session, company_id: str, url: str) -> tuple[Video, bool]:
        """
        Raises:
            NotFoundError(404): unknown company.
            ConflictError(400): URL already listed.
        """
        require_company(session, self.users, company_id)
        doc = self.repo.get_video(session, company_id)
        created = doc is None
        if created:
            doc = Video(company_id=company_id, urls=[])
        elif url in doc.urls:
            raise ConflictError("video_exists", "Video already exists in the list")

        doc.urls = [*doc.urls, url]
        return self.repo.save(session, doc), created

    def get_videos(self, session: Session, company_id: str) -> Video:
        doc = self.repo.get_video(session, company_id)
        if doc is None:
            raise NotFoundError("videos_not_found", "No videos found for this company")
        return doc

    def delete_video(self, session: Session, company_id: str, url: str) -> Video:
        """
        Raises:
            NotFoundError(404): no video list, or `url` is not in it.
        """
        doc = self.get_videos(session, company_id)
        if url not in doc.urls:
            raise NotFoundError("video_not_found", "Video URL not found")
        doc.urls = [u for u in doc.urls if u != url]
        return self.repo.save(session, doc)
