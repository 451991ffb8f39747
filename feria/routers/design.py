# feria/routers/design.py
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlmodel import Session

from feria.core.auth import (
    Subject,
    SubjectPolicy,
    require_role,
    set_session_cookie,
    subject,
)
from feria.core.security import TokenService, get_token_service
from feria.core.storage import StorageService, get_storage, read_upload
from feria.database import get_session
from feria.repositories.design_repo import DesignRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import ADMIN
from feria.schemas.design import BoothModelRead, DesignDetail, StandRead
from feria.services.auth_service import AuthService
from feria.services.design_service import DesignService

router = APIRouter(prefix="/design", tags=["Design"])

users = UserRepository()
repo = DesignRepository()
service = DesignService(repo, users, AuthService(users))

owner_write = subject(SubjectPolicy.ADMIN_OVERRIDE, deny_visitor="visitors cannot manage designs")


# -------- Public catalogs --------


@router.get("/stand", response_model=list[StandRead])
def list_stands(session: Session = Depends(get_session)):
    """Stand shapes a company can pick from (public)."""
    return service.list_stands(session)


@router.get("/model", response_model=list[BoothModelRead])
def list_models(session: Session = Depends(get_session)):
    """3D booth models a company can pick from (public)."""
    return service.list_models(session)


# -------- Company design --------


@router.post("/addDesign", status_code=status.HTTP_201_CREATED)
@router.post("/addDesign/{company_id}", status_code=status.HTTP_201_CREATED)
def add_design(
    response: Response,
    stand_id: str = Form(...),
    model_id: str = Form(...),
    banner: UploadFile | None = File(None),
    poster: UploadFile | None = File(None),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create the company's design with optional banner and poster.

    Marks the company's design as complete. When a company designs its own
    stand the session cookie is replaced so the new flag is visible at once.
    """
    design, token = service.create_design(
        session,
        storage,
        tokens,
        target,
        stand_id,
        model_id,
        banner=read_upload(banner),
        poster=read_upload(poster),
    )
    if token:
        set_session_cookie(response, token)
    return {"message": "Design created successfully", "id": design.id}


@router.get("/getDesign", response_model=DesignDetail)
@router.get("/getDesign/{company_id}", response_model=DesignDetail)
def get_design(
    target: Subject = Depends(subject(SubjectPolicy.SELF_OR_PUBLIC)),
    session: Session = Depends(get_session),
):
    return service.get_design(session, target.id)


@router.get(
    "/allDesigns",
    response_model=list[DesignDetail],
    dependencies=[Depends(require_role(ADMIN))],
)
def list_designs(session: Session = Depends(get_session)):
    """All designs with stand, model and files resolved (admin only)."""
    return service.list_designs(session)


@router.put("/updateDesign", response_model=DesignDetail)
@router.put("/updateDesign/{company_id}", response_model=DesignDetail)
def update_design(
    stand_id: str | None = Form(None),
    model_id: str | None = Form(None),
    banner: UploadFile | None = File(None),
    poster: UploadFile | None = File(None),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    Change stand/model and replace banner/poster. Omitted parts stay as they are.
    """
    return service.update_design(
        session,
        storage,
        target.id,
        stand_id=stand_id or None,
        model_id=model_id or None,
        banner=read_upload(banner),
        poster=read_upload(poster),
    )


@router.delete("/deleteDesign")
@router.delete("/deleteDesign/{company_id}")
def delete_design(
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    service.delete_design(session, storage, target.id)
    return {"message": "Design deleted successfully"}
