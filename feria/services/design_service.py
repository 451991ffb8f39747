# feria/services/design_service.py
import logging

from sqlmodel import Session

from feria.core.auth import Subject
from feria.core.errors import ConflictError, NotFoundError, ValidationError
from feria.core.security import TokenService
from feria.core.storage import StorageService, UploadedFile
from feria.models.common import utcnow
from feria.models.design import BoothModel, Design, DesignFiles, Stand
from feria.repositories.design_repo import DesignRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.design import (
    BoothModelRead,
    DesignDetail,
    DesignFilesRead,
    DesignRead,
    StandRead,
)
from feria.services.auth_service import AuthService
from feria.services.user_service import require_company

logger = logging.getLogger(__name__)


class DesignService:
    """
    Business logic for company stand designs.

    Responsibilities:
      - one design (and one banner/poster set) per company
      - banner/poster upload + replacement in storage
      - flipping `design_complete` and refreshing the caller's claims
    """

    def __init__(self, repo: DesignRepository, users: UserRepository, auth: AuthService):
        self.repo = repo
        self.users = users
        self.auth = auth

    # ----- Helpers -----

    def _detail(self, session: Session, design: Design) -> DesignDetail:
        stand = self.repo.get_stand(session, design.stand_id)
        if stand is None:
            logger.warning("Stand %s of design %s not found", design.stand_id, design.id)
        model = self.repo.get_model(session, design.model_id)
        if model is None:
            logger.warning("Model %s of design %s not found", design.model_id, design.id)
        files = self.repo.get_files(session, design.files_id)

        return DesignDetail(
            design=DesignRead.model_validate(design, from_attributes=True),
            stand=StandRead.model_validate(stand, from_attributes=True) if stand else None,
            model=BoothModelRead.model_validate(model, from_attributes=True) if model else None,
            files=DesignFilesRead.model_validate(files, from_attributes=True) if files else None,
        )

    def _check_catalog(self, session: Session, stand_id: str, model_id: str) -> None:
        if self.repo.get_stand(session, stand_id) is None:
            raise NotFoundError("stand_not_found", "Stand not found")
        if self.repo.get_model(session, model_id) is None:
            raise NotFoundError("model_not_found", "Model not found")

    @staticmethod
    def _replace(
        storage: StorageService,
        current_url: str | None,
        upload: UploadedFile | None,
        folder: str,
    ) -> str | None:
        """Upload `upload` in place of `current_url`; keep the current one if none given."""
        if upload is None:
            return current_url
        new_url = storage.upload(upload, folder).url
        storage.delete_url(current_url)
        return new_url

    # ----- Catalogs -----

    def list_stands(self, session: Session) -> list[Stand]:
        return self.repo.list_stands(session)

    def list_models(self, session: Session) -> list[BoothModel]:
        return self.repo.list_models(session)

    # ----- Designs -----

    def create_design(
        self,
        session: Session,
        storage: StorageService,
        tokens: TokenService,
        subject: Subject,
        stand_id: str,
        model_id: str,
        banner: UploadedFile | None = None,
        poster: UploadedFile | None = None,
    ) -> tuple[Design, str | None]:
        """
        Create the company's design.

        Returns:
            (design, token) where token is a re-issued session token when
            the caller designed their own stand, else None.

        Raises:
            ValidationError(400): stand_id / model_id missing.
            NotFoundError(404): company, stand or model unknown.
            ConflictError(400): design or design files already exist.
        """
        if not stand_id.strip() or not model_id.strip():
            raise ValidationError("invalid_request", "Please provide stand_id and model_id")

        company = require_company(session, self.users, subject.id)
        self._check_catalog(session, stand_id, model_id)

        if self.repo.get_by_company(session, company.id) is not None:
            raise ConflictError("design_exists", "Design already exists for this company")
        if self.repo.get_files_by_company(session, company.id) is not None:
            raise ConflictError("files_exist", "Files already exist for this company.")

        files = DesignFiles(
            company_id=company.id,
            banner_url=storage.upload(banner, "banners").url if banner else None,
            poster_url=storage.upload(poster, "posters").url if poster else None,
        )
        files = self.repo.save_files(session, files)

        logo = self.users.get_logo(session, company.id)
        design = self.repo.save(
            session,
            Design(
                company_id=company.id,
                stand_id=stand_id,
                model_id=model_id,
                files_id=files.id,
                logo_url=logo.url if logo else None,
            ),
        )

        company.design_complete = True
        self.users.update(session, company)
        logger.info("Design %s created for company %s", design.id, company.id)

        token = self.auth.refresh(session, tokens, company.id) if subject.is_self else None
        return design, token

    def get_design(self, session: Session, company_id: str) -> DesignDetail:
        design = self.repo.get_by_company(session, company_id)
        if design is None:
            raise NotFoundError("design_not_found", "Design not found for this company.")
        return self._detail(session, design)

    def list_designs(self, session: Session) -> list[DesignDetail]:
        return [self._detail(session, d) for d in self.repo.list(session)]

    def update_design(
        self,
        session: Session,
        storage: StorageService,
        company_id: str,
        stand_id: str | None = None,
        model_id: str | None = None,
        banner: UploadedFile | None = None,
        poster: UploadedFile | None = None,
    ) -> DesignDetail:
        """
        Change stand/model and replace banner/poster.

        Previously stored banner/poster objects are deleted only when a new
        file replaces them.
        """
        design = self.repo.get_by_company(session, company_id)
        if design is None:
            raise ValidationError("design_missing", "Design does not exist for this company.")
        files = self.repo.get_files_by_company(session, company_id)
        if files is None:
            raise ValidationError("files_missing", "Files do not exist for this company.")

        self._check_catalog(session, stand_id or design.stand_id, model_id or design.model_id)

        files.banner_url = self._replace(storage, files.banner_url, banner, "banners")
        files.poster_url = self._replace(storage, files.poster_url, poster, "posters")
        files.updated_at = utcnow()
        self.repo.save_files(session, files)

        design.stand_id = stand_id or design.stand_id
        design.model_id = model_id or design.model_id
        design = self.repo.save(session, design)
        return self._detail(session, design)

    def update_files(
        self,
        session: Session,
        storage: StorageService,
        company_id: str,
        banner: UploadedFile | None = None,
        poster: UploadedFile | None = None,
    ) -> DesignFiles:
        """Replace only the banner/poster of an existing design."""
        files = self.repo.get_files_by_company(session, company_id)
        if files is None:
            raise NotFoundError("files_not_found", "No existing files found for this company.")

        files.banner_url = self._replace(storage, files.banner_url, banner, "banners")
        files.poster_url = self._replace(storage, files.poster_url, poster, "posters")
        files.updated_at = utcnow()
        return self.repo.save_files(session, files)

    def delete_design(self, session: Session, storage: StorageService, company_id: str) -> None:
        """
        Remove the design, its files row and the stored banner/poster.

        `design_complete` stays true: it records that the milestone was
        reached once.
        """
        design = self.repo.get_by_company(session, company_id)
        if design is None:
            raise NotFoundError("design_not_found", "Design not found")

        files = self.repo.get_files(session, design.files_id)
        if files is not None:
            storage.delete_url(files.banner_url)
            storage.delete_url(files.poster_url)
            self.repo.delete_files(session, files)

        self.repo.delete(session, design)
        logger.info("Design %s of company %s deleted", design.id, company_id)
