# feria/routers/users.py
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session

from feria.core.auth import (
    Subject,
    SubjectPolicy,
    require_identity,
    require_role,
    subject,
)
from feria.core.errors import ValidationError
from feria.core.storage import StorageService, get_storage, read_upload
from feria.database import get_session
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.design_repo import DesignRepository
from feria.repositories.offer_repo import OfferRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import ADMIN, COMPANY, VISITOR, Identity
from feria.schemas.user import CompanyOverview, UserRead, UserRegister, UserUpdate
from feria.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])

repo = UserRepository()
service = UserService(repo, DesignRepository(), OfferRepository(), CompanyRepository())


# -------- Registration --------


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(...),
    role: str = Form(...),
    tax_id: str | None = Form(None),
    dni: str | None = Form(None),
    subname: str | None = Form(None),
    studies: str | None = Form(None),
    phone: str | None = Form(None),
    logo: UploadFile | None = File(None),
    profile_image: UploadFile | None = File(None),
    cv: UploadFile | None = File(None),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    Create an account (multipart form).

    - Public endpoint; does not log the new user in.
    - Companies may attach a `logo`; visitors a `profile_image` and a `cv`.
    """
    payload = UserRegister(
        name=name,
        email=email,
        password=password,
        role=role,
        tax_id=tax_id,
        dni=dni,
        subname=subname,
        studies=studies,
        phone=phone,
    )
    user = service.register(
        session,
        storage,
        payload,
        logo=read_upload(logo),
        profile_image=read_upload(profile_image),
        cv=read_upload(cv),
    )
    return {"message": "User registered successfully", "id": user.id}


# -------- Listings --------


@router.get("/companies", response_model=list[UserRead], dependencies=[Depends(require_identity)])
def list_companies(session: Session = Depends(get_session)):
    return service.list_users(session, role=COMPANY)


@router.get(
    "/companies/unity",
    response_model=list[CompanyOverview],
    dependencies=[Depends(require_role(ADMIN))],
)
def companies_overview(session: Session = Depends(get_session)):
    """
    Every company with everything its stand shows (admin only, cookie session).
    """
    return service.company_overview(session)


@router.get("/visitors", response_model=list[UserRead], dependencies=[Depends(require_identity)])
def list_visitors(session: Session = Depends(get_session)):
    return service.list_users(session, role=VISITOR)


@router.get("/admins", response_model=list[UserRead], dependencies=[Depends(require_identity)])
def list_admins(session: Session = Depends(get_session)):
    return service.list_users(session, role=ADMIN)


@router.get("/all", response_model=list[UserRead], dependencies=[Depends(require_identity)])
def list_all(session: Session = Depends(get_session)):
    return service.list_users(session)


# -------- Logo --------


@router.put("/logo", response_model=UserRead)
@router.put("/logo/{company_id}", response_model=UserRead)
def update_logo(
    logo: UploadFile = File(...),
    target: Subject = Depends(
        subject(SubjectPolicy.ADMIN_OVERRIDE, deny_visitor="visitors cannot upload logos")
    ),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    Replace the account's logo. Admins pass the target account id.
    """
    upload = read_upload(logo)
    if upload is None:
        raise ValidationError("invalid_request", "A logo file is required")
    service.update_logo(session, storage, target.id, upload)
    return service.to_read(session, service.get_user(session, target.id))


# -------- Single user --------


@router.get("", response_model=UserRead)
@router.get("/{user_id}", response_model=UserRead)
def get_user(
    target: Subject = Depends(subject(SubjectPolicy.SELF_OR_PUBLIC, param="user_id")),
    session: Session = Depends(get_session),
):
    """
    The given user, or the caller when no id is passed.
    """
    return service.to_read(session, service.get_user(session, target.id))


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: str,
    payload: UserUpdate,
    identity: Identity = Depends(require_identity),
    session: Session = Depends(get_session),
):
    """
    Partial update (the user themself or an admin). Only admins change roles.
    """
    user = service.update_user(session, identity, user_id, payload)
    return service.to_read(session, user)


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    identity: Identity = Depends(require_identity),
    session: Session = Depends(get_session),
):
    """
    Delete an account (the user themself or an admin).

    Owned designs, offers and files are not removed.
    """
    service.delete_user(session, identity, user_id)
    return {"message": "User deleted successfully"}
