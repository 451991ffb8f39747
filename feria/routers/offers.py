# feria/routers/offers.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from feria.core.auth import Subject, SubjectPolicy, deny_role, require_identity, subject
from feria.database import get_session
from feria.repositories.offer_repo import OfferRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import VISITOR, Identity
from feria.schemas.offer import OfferCreate, OfferRead, OfferUpdate
from feria.services.offer_service import OfferService

router = APIRouter(prefix="/offers", tags=["Offers"])

repo = OfferRepository()
service = OfferService(repo, UserRepository())

DENY_VISITOR = "visitors cannot manage offers"


@router.post("/add", response_model=OfferRead, status_code=status.HTTP_201_CREATED)
@router.post("/add/{company_id}", response_model=OfferRead, status_code=status.HTTP_201_CREATED)
def add_offer(
    payload: OfferCreate,
    target: Subject = Depends(subject(SubjectPolicy.ADMIN_OVERRIDE, deny_visitor=DENY_VISITOR)),
    session: Session = Depends(get_session),
):
    """Publish an offer for the caller's company (admins pass the company id)."""
    return service.add_offer(session, target.id, payload)


@router.get("/company", response_model=list[OfferRead])
@router.get("/company/{company_id}", response_model=list[OfferRead])
def list_company_offers(
    target: Subject = Depends(subject(SubjectPolicy.SELF_OR_PUBLIC)),
    session: Session = Depends(get_session),
):
    return service.list_by_company(session, target.id)


@router.get("/all", response_model=list[OfferRead], dependencies=[Depends(require_identity)])
def list_offers(session: Session = Depends(get_session)):
    return service.list_all(session)


@router.get("/search", response_model=list[OfferRead], dependencies=[Depends(require_identity)])
def search_offers(
    keyword: str | None = None,
    location: str | None = None,
    job_type: str | None = None,
    workplace_type: str | None = None,
    company: str | None = None,
    sector: str | None = None,
    session: Session = Depends(get_session),
):
    """
    Filter offers.

    - location, job_type, workplace_type, company (name), sector: exact match
    - keyword: case-insensitive match in position or description
    """
    return service.search(
        session,
        keyword=keyword,
        location=location,
        job_type=job_type,
        workplace_type=workplace_type,
        company=company,
        sector=sector,
    )


@router.put("/update/{offer_id}", response_model=OfferRead)
def update_offer(
    offer_id: str,
    payload: OfferUpdate,
    caller: Identity = Depends(deny_role(VISITOR, DENY_VISITOR)),
    session: Session = Depends(get_session),
):
    """Owner company or admin only."""
    return service.update_offer(session, caller, offer_id, payload)


@router.delete("/delete/{offer_id}")
def delete_offer(
    offer_id: str,
    caller: Identity = Depends(deny_role(VISITOR, DENY_VISITOR)),
    session: Session = Depends(get_session),
):
    service.delete_offer(session, caller, offer_id)
    return {"message": "Offer deleted successfully"}
