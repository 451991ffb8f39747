# feria/services/information_service.py
import logging

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session

from feria.core.auth import Subject
from feria.core.errors import ConflictError, NotFoundError, ValidationError
from feria.core.security import TokenService
from feria.core.storage import StorageError, StorageService, UploadedFile
from feria.models.common import utcnow
from feria.models.company import CompanyInformation, EventLinks
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.information import EventCreate, InfoDocument, InfoLink, InformationUpdate
from feria.services.auth_service import AuthService
from feria.services.user_service import require_company

logger = logging.getLogger(__name__)

_links_adapter = TypeAdapter(list[InfoLink])
_names_adapter = TypeAdapter(list[str])


def parse_links(raw: str | None) -> list[InfoLink]:
    """
    Parse the `links` multipart field (a JSON list).

    Raises:
        ValidationError(400): not JSON, or an entry lacks
            additionalButtonTitle / additionalButtonLink.
    """
    if raw is None or not raw.strip():
        return []
    try:
        return _links_adapter.validate_json(raw)
    except PydanticValidationError:
        raise ValidationError(
            "invalid_links",
            "Links must have additionalButtonTitle and additionalButtonLink",
        )


def parse_names(raw: str | None) -> list[str]:
    """Parse a JSON list of document file names (multipart `keep` field)."""
    if raw is None or not raw.strip():
        return []
    try:
        return _names_adapter.validate_json(raw)
    except PydanticValidationError:
        raise ValidationError("invalid_request", "keep must be a JSON list of file names")


def _dump_links(links: list[InfoLink]) -> list[dict]:
    return [link.model_dump(by_alias=True) for link in links]


class InformationService:
    """
    Company information page, its documents and calendar events.

    Documents are stored as [{"fileName": ..., "url": ...}] next to the page.
    """

    def __init__(self, repo: CompanyRepository, users: UserRepository, auth: AuthService):
        self.repo = repo
        self.users = users
        self.auth = auth

    # ----- Helpers -----

    def _get(self, session: Session, company_id: str) -> CompanyInformation:
        info = self.repo.get_information(session, company_id)
        if info is None:
            raise NotFoundError("information_not_found", "Company information not found")
        return info

    @staticmethod
    def _upload_documents(storage: StorageService, files: list[UploadedFile]) -> list[dict]:
        uploaded = []
        for f in files:
            stored = storage.upload(f, "companyDocuments")
            uploaded.append(InfoDocument(file_name=f.filename, url=stored.url).model_dump(by_alias=True))
        return uploaded

    @staticmethod
    def _drop_documents(storage: StorageService, documents: list[dict]) -> None:
        # A failed delete leaves an orphan object; the page update still goes through.
        for doc in documents:
            try:
                storage.delete_url(doc.get("url"))
            except StorageError:
                logger.warning("Failed to delete document %s", doc.get("fileName"), exc_info=True)

    # ----- Information page -----

    def add_information(
        self,
        session: Session,
        storage: StorageService,
        tokens: TokenService,
        subject: Subject,
        description: str,
        additional_information: str | None = None,
        sector: str | None = None,
        links: list[InfoLink] | None = None,
        documents: list[UploadedFile] | None = None,
    ) -> tuple[CompanyInformation, str | None]:
        """
        Create the company's information page and flip `information_complete`.

        Returns:
            (information, token) with token re-issued only when the caller
            edited their own page.

        Raises:
            ValidationError(400): empty description.
            NotFoundError(404): unknown company.
            ConflictError(400): page already exists.
        """
        if not description or not description.strip():
            raise ValidationError("invalid_request", "Description is required")

        company = require_company(session, self.users, subject.id)
        if self.repo.get_information(session, company.id) is not None:
            raise ConflictError("information_exists", "Information already exists for this company")

        info = CompanyInformation(
            company_id=company.id,
            description=description.strip(),
            additional_information=additional_information or "",
            sector=sector or None,
            links=_dump_links(links or []),
            documents=self._upload_documents(storage, documents or []),
        )
        info = self.repo.save(session, info)

        company.information_complete = True
        self.users.update(session, company)
        logger.info("Information page %s created for company %s", info.id, company.id)

        token = self.auth.refresh(session, tokens, company.id) if subject.is_self else None
        return info, token

    def get_information(self, session: Session, company_id: str) -> CompanyInformation:
        return self._get(session, company_id)

    def update_information(
        self,
        session: Session,
        company_id: str,
        payload: InformationUpdate,
    ) -> CompanyInformation:
        """Replace the text fields; omitted optional fields are reset."""
        info = self._get(session, company_id)
        info.description = payload.description
        info.additional_information = payload.additional_information or ""
        info.links = _dump_links(payload.links or [])
        info.sector = payload.sector or None
        info.updated_at = utcnow()
        return self.repo.save(session, info)

    def delete_documents(
        self,
        session: Session,
        storage: StorageService,
        company_id: str,
        keep: list[str],
    ) -> CompanyInformation:
        """
        Keep only the documents whose file name is listed; delete the stored
        objects of the others.
        """
        info = self._get(session, company_id)
        kept = [d for d in info.documents if d.get("fileName") in keep]
        dropped = [d for d in info.documents if d.get("fileName") not in keep]

        self._drop_documents(storage, dropped)

        info.documents = kept
        info.updated_at = utcnow()
        info = self.repo.save(session, info)
        logger.info("Removed %d documents of company %s", len(dropped), company_id)
        return info

    def update_documents(
        self,
        session: Session,
        storage: StorageService,
        company_id: str,
        keep: list[str],
        uploads: list[UploadedFile],
    ) -> CompanyInformation:
        """Same as `delete_documents`, then append freshly uploaded documents."""
        info = self._get(session, company_id)
        kept = [d for d in info.documents if d.get("fileName") in keep]
        dropped = [d for d in info.documents if d.get("fileName") not in keep]

        self._drop_documents(storage, dropped)

        info.documents = kept + self._upload_documents(storage, uploads)
        info.updated_at = utcnow()
        return self.repo.save(session, info)

    # ----- Calendar events -----

    def add_event(self, session: Session, company_id: str, payload: EventCreate) -> tuple[EventLinks, bool]:
        """
        Append an event to the company's calendar.

        Returns:
            (events document, created) where created is True for the first event.
        """
        require_company(session, self.users, company_id)
        doc = self.repo.get_events(session, company_id)
        created = doc is None
        if created:
            doc = EventLinks(company_id=company_id, events=[])

        # Reassign so the JSON column is flagged as modified.
        doc.events = [*doc.events, payload.model_dump()]
        return self.repo.save(session, doc), created

    def get_events(self, session: Session, company_id: str) -> list[dict]:
        doc = self.repo.get_events(session, company_id)
        if doc is None:
            raise NotFoundError("events_not_found", "No events found for this company")
        return list(doc.events)

