# feria/services/user_service.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from feria.core.auth import ensure_self_or_admin
from feria.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from feria.core.security import hash_password
from feria.core.storage import StorageService, UploadedFile
from feria.models.user import Logo, User
from feria.models.common import utcnow
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.design_repo import DesignRepository
from feria.repositories.offer_repo import OfferRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import COMPANY, ROLES, VISITOR, Identity
from feria.schemas.user import CompanyOverview, UserRead, UserRegister, UserUpdate

logger = logging.getLogger(__name__)


def require_company(session: Session, repo: UserRepository, company_id: str) -> User:
    """
    Load a company account.

    Raises:
        NotFoundError(404): no account with this id, or it is not a company.
    """
    user = repo.get_by_id(session, company_id)
    if user is None or user.role != COMPANY:
        raise NotFoundError("company_not_found", "Company not found")
    return user


class UserService:
    """
    Business logic for accounts.

    Responsibilities:
      - registration (uniqueness, hashing, role-specific profile fields)
      - self/admin profile updates and deletes
      - logo replacement in storage
      - listings and the admin company overview
    """

    def __init__(
        self,
        repo: UserRepository,
        designs: DesignRepository,
        offers: OfferRepository,
        companies: CompanyRepository,
    ):
        self.repo = repo
        self.designs = designs
        self.offers = offers
        self.companies = companies

    # ----- Helpers -----

    def to_read(self, session: Session, user: User) -> UserRead:
        """Public view of a user with its logo URL resolved."""
        logo = self.repo.get_logo(session, user.id) if user.logo_id else None
        data = user.model_dump(exclude={"password_hash", "logo_id"})
        return UserRead(**data, logo_url=logo.url if logo else None)

    def get_user(self, session: Session, user_id: str) -> User:
        """
        Raises:
            NotFoundError(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("user_not_found", "User not found")
        return user

    def _ensure_unique(
        self,
        session: Session,
        name: str | None,
        email: str | None,
        current_id: str | None = None,
    ) -> None:
        if email is not None:
            existing = self.repo.get_by_email(session, email)
            if existing is not None and existing.id != current_id:
                raise ConflictError("invalid_email", "Email already exists.")
        if name is not None:
            existing = self.repo.get_by_name(session, name)
            if existing is not None and existing.id != current_id:
                raise ConflictError("invalid_name", "Name already exists.")

    # ----- Registration -----

    def register(
        self,
        session: Session,
        storage: StorageService,
        payload: UserRegister,
        logo: UploadedFile | None = None,
        profile_image: UploadedFile | None = None,
        cv: UploadedFile | None = None,
    ) -> User:
        """
        Create an account. Does not log the user in.

        Steps:
          validate role -> name/email uniqueness -> hash password ->
          upload optional files -> persist role-specific fields -> logo row

        Raises:
            ValidationError(400): `invalid_request`, `invalid_role`.
            ConflictError(400): `invalid_email`, `invalid_name`.
        """
        if not all(v.strip() for v in (payload.name, payload.email, payload.password, payload.role)):
            raise ValidationError("invalid_request", "Invalid request.")

        if payload.role not in ROLES:
            raise ValidationError("invalid_role", "Invalid role")

        self._ensure_unique(session, payload.name, payload.email)

        user = User(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=payload.role,
        )

        if payload.role == COMPANY:
            user.tax_id = payload.tax_id
        elif payload.role == VISITOR:
            user.dni = payload.dni
            user.subname = payload.subname
            user.studies = payload.studies
            user.phone = payload.phone
            if profile_image is not None:
                user.image_url = storage.upload(profile_image, "profileImages").url
            if cv is not None:
                user.cv_url = storage.upload(cv, "cvFiles").url

        logo_url = storage.upload(logo, "logos").url if logo is not None else None
        uploaded = [u for u in (user.image_url, user.cv_url, logo_url) if u]

        try:
            user = self.repo.create(session, user)
        except IntegrityError:
            # Lost a race against a concurrent registration with the same name/email.
            session.rollback()
            for url in uploaded:
                storage.delete_url(url)
            raise ConflictError("duplicate_user", "Name or email already exists.")

        if logo_url is not None:
            saved = self.repo.save_logo(session, Logo(company_id=user.id, url=logo_url))
            user.logo_id = saved.id
            user = self.repo.update(session, user)

        logger.info("Registered %s account %s", user.role, user.id)
        return user

    # ----- Listings -----

    def list_users(self, session: Session, role: str | None = None) -> list[UserRead]:
        return [self.to_read(session, u) for u in self.repo.list(session, role=role)]

    def company_overview(self, session: Session) -> list[CompanyOverview]:
        """
        Every company with logo, offers, videos, information page and design
        (stand, model and files resolved). Admin only.
        """
        results: list[CompanyOverview] = []
        for company in self.repo.list(session, role=COMPANY):
            logo = self.repo.get_logo(session, company.id)
            video = self.companies.get_video(session, company.id)
            information = self.companies.get_information(session, company.id)
            offers = self.offers.list(session, company_id=company.id)

            design_data = None
            design = self.designs.get_by_company(session, company.id)
            if design is not None:
                stand = self.designs.get_stand(session, design.stand_id)
                model = self.designs.get_model(session, design.model_id)
                files = self.designs.get_files(session, design.files_id)
                design_data = {
                    "id": design.id,
                    "stand": stand.model_dump(exclude={"uploaded_at"}) if stand else None,
                    "model": model.model_dump(exclude={"uploaded_at"}) if model else None,
                    "files": files.model_dump(exclude={"company_id", "created_at"}) if files else None,
                }

            results.append(
                CompanyOverview(
                    user=self.to_read(session, company),
                    logo={"id": logo.id, "url": logo.url} if logo else None,
                    offers=[o.model_dump(exclude={"company_id"}) for o in offers],
                    videos=list(video.urls) if video else [],
                    information=information.model_dump(exclude={"company_id"}) if information else None,
                    design=design_data,
                )
            )
        return results

    # ----- Updates -----

    def update_user(
        self,
        session: Session,
        identity: Identity,
        user_id: str,
        payload: UserUpdate,
    ) -> User:
        """
        Partial profile update by the user themself or an admin.

        Raises:
            AuthorizationError(403): not self/admin, or non-admin role change.
            NotFoundError(404): unknown user.
            ValidationError(400): `invalid_tax_id`, `invalid_dni`.
            ConflictError(400): `invalid_name`, `invalid_email`.
        """
        ensure_self_or_admin(identity, user_id)
        user = self.get_user(session, user_id)

        if payload.role is not None and payload.role != user.role and not identity.is_admin:
            raise AuthorizationError("Access denied: only administrators can change roles.")

        role = payload.role or user.role
        if payload.role == COMPANY and not payload.tax_id:
            raise ValidationError("invalid_tax_id", "Tax id is required for companies.")
        if payload.role == VISITOR and not (payload.dni and payload.studies):
            raise ValidationError("invalid_dni", "DNI and studies are required for visitors.")

        self._ensure_unique(
            session,
            payload.name if payload.name != user.name else None,
            payload.email if payload.email != user.email else None,
            current_id=user.id,
        )

        if payload.name is not None:
            user.name = payload.name
        if payload.email is not None:
            user.email = payload.email
        if payload.password is not None:
            user.password_hash = hash_password(payload.password)
        user.role = role

        if role == COMPANY and payload.tax_id is not None:
            user.tax_id = payload.tax_id
        if role == VISITOR:
            for field in ("dni", "subname", "studies", "phone"):
                value = getattr(payload, field)
                if value is not None:
                    setattr(user, field, value)

        try:
            return self.repo.update(session, user)
        except IntegrityError:
            session.rollback()
            raise ConflictError("duplicate_user", "Name or email already exists.")

    def delete_user(self, session: Session, identity: Identity, user_id: str) -> None:
        """
        Delete an account (self or admin).

        Designs, offers, files and logos owned by the account are left in
        place; there is no cascade.
        """
        ensure_self_or_admin(identity, user_id)
        user = self.get_user(session, user_id)
        self.repo.delete(session, user)
        logger.info("Deleted account %s (by %s)", user_id, identity.id)

    def update_logo(
        self,
        session: Session,
        storage: StorageService,
        user_id: str,
        file: UploadedFile,
    ) -> Logo:
        """
        Replace an account's logo: delete the previous object, upload the new
        one, point the logo row at it (creating the row on first upload).
        """
        user = self.get_user(session, user_id)
        logo = self.repo.get_logo(session, user.id)

        if logo is not None:
            storage.delete_url(logo.url)

        url = storage.upload(file, "logos").url

        if logo is None:
            logo = Logo(company_id=user.id, url=url)
        else:
            logo.url = url
            logo.uploaded_at = utcnow()
        logo = self.repo.save_logo(session, logo)

        if user.logo_id != logo.id:
            user.logo_id = logo.id
            self.repo.update(session, user)
        return logo
