# feria/services/offer_service.py
import logging

from sqlmodel import Session

from feria.core.errors import AuthorizationError, NotFoundError
from feria.models.common import utcnow
from feria.models.offer import Offer
from feria.repositories.offer_repo import OfferRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import Identity
from feria.schemas.offer import OfferCreate, OfferUpdate
from feria.services.user_service import require_company

logger = logging.getLogger(__name__)


class OfferService:
    """
    Job offers.

    Only the owning company or an admin may modify an offer. Reads are open to
    any authenticated user.
    """

    def __init__(self, repo: OfferRepository, users: UserRepository):
        self.repo = repo
        self.users = users

    def _get_owned(self, session: Session, identity: Identity, offer_id: str) -> Offer:
        offer = self.repo.get_by_id(session, offer_id)
        if offer is None:
            raise NotFoundError("offer_not_found", "Offer not found")
        if not identity.is_admin and offer.company_id != identity.id:
            raise AuthorizationError("Access denied: you do not own this offer")
        return offer

    def add_offer(self, session: Session, company_id: str, payload: OfferCreate) -> Offer:
        """
        Publish an offer for `company_id`.

        The company's name and logo are copied onto the offer.

        Raises:
            NotFoundError(404): unknown company.
        """
        company = require_company(session, self.users, company_id)
        logo = self.users.get_logo(session, company.id)

        offer = Offer(
            **payload.model_dump(),
            company_id=company.id,
            company_name=company.name,
            logo_url=logo.url if logo else None,
        )
        offer = self.repo.save(session, offer)
        logger.info("Offer %s published by company %s", offer.id, company.id)
        return offer

    def list_by_company(self, session: Session, company_id: str) -> list[Offer]:
        return self.repo.list(session, company_id=company_id)

    def list_all(self, session: Session) -> list[Offer]:
        return self.repo.list(session)

    def search(
        self,
        session: Session,
        keyword: str | None = None,
        location: str | None = None,
        job_type: str | None = None,
        workplace_type: str | None = None,
        company: str | None = None,
        sector: str | None = None,
    ) -> list[Offer]:
        """
        Equality filters on the structured fields, then a case-insensitive
        keyword match on position or description.

        Example:
            service.search(session, keyword="python", location="Madrid")
        """
        filters = {
            "location": location,
            "job_type": job_type,
            "workplace_type": workplace_type,
            "company_name": company,
            "sector": sector,
        }
        offers = self.repo.list(session, **{k: v for k, v in filters.items() if v})

        if keyword:
            needle = keyword.lower()
            offers = [
                o for o in offers
                if needle in o.position.lower() or needle in o.description.lower()
            ]
        return offers

    def update_offer(
        self,
        session: Session,
        identity: Identity,
        offer_id: str,
        payload: OfferUpdate,
    ) -> Offer:
        """
        Raises:
            NotFoundError(404): unknown offer.
            AuthorizationError(403): caller is neither the owner nor an admin.
        """
        offer = self._get_owned(session, identity, offer_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(offer, field, value)
        offer.updated_at = utcnow()
        return self.repo.save(session, offer)

    def delete_offer(self, session: Session, identity: Identity, offer_id: str) -> None:
        offer = self._get_owned(session, identity, offer_id)
        self.repo.delete(session, offer)
        logger.info("Offer %s deleted by %s", offer_id, identity.id)
