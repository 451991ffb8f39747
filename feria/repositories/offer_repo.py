# feria/repositories/offer_repo.py
from sqlmodel import Session, select

from feria.models.offer import Offer


class OfferRepository:
    """
    Data access layer for Offer.

    - Pure DB operations (CRUD + equality queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, offer_id: str) -> Offer | None:
        return session.get(Offer, offer_id)

    def list(self, session: Session, **filters: str) -> list[Offer]:
        """
        List offers matching every given equality filter.

        Example:
            repo.list(session, company_id="abc", sector="IT")
        """
        stmt = select(Offer)
        for field, value in filters.items():
            stmt = stmt.where(getattr(Offer, field) == value)
        return list(session.exec(stmt.order_by(Offer.created_at)).all())

    def save(self, session: Session, offer: Offer) -> Offer:
        session.add(offer)
        session.commit()
        session.refresh(offer)
        return offer

    def delete(self, session: Session, offer: Offer) -> None:
        session.delete(offer)
        session.commit()
