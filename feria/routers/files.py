# feria/routers/files.py
from fastapi import APIRouter, Depends, File, Response, UploadFile, status
from sqlmodel import Session

from feria.core.auth import Subject, SubjectPolicy, subject
from feria.core.errors import ValidationError
from feria.core.storage import StorageService, get_storage, read_upload
from feria.database import get_session
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.design_repo import DesignRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.design import DesignFilesRead
from feria.schemas.media import UrlList
from feria.services.auth_service import AuthService
from feria.services.design_service import DesignService
from feria.services.media_service import MediaService

router = APIRouter(prefix="/file", tags=["Files"])

users = UserRepository()
media = MediaService(CompanyRepository(), users)
designs = DesignService(DesignRepository(), users, AuthService(users))

owner_write = subject(SubjectPolicy.ADMIN_OVERRIDE, deny_visitor="visitors cannot manage files")


@router.get("/company", response_model=UrlList)
@router.get("/company/{company_id}", response_model=UrlList)
def get_files(
    target: Subject = Depends(subject(SubjectPolicy.SELF_OR_PUBLIC)),
    session: Session = Depends(get_session),
):
    """Downloadable files of a company (the caller's when no id is passed)."""
    return media.get_download_files(session, target.id)


@router.post("/company", response_model=UrlList, status_code=status.HTTP_201_CREATED)
@router.post("/company/{company_id}", response_model=UrlList, status_code=status.HTTP_201_CREATED)
def add_file(
    response: Response,
    file: UploadFile = File(...),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    Upload one downloadable file.

    201 when this creates the company's file list, 200 when appended.
    """
    upload = read_upload(file)
    if upload is None:
        raise ValidationError("invalid_request", "A file is required")
    doc, created = media.add_download_file(session, storage, target.id, upload)
    if not created:
        response.status_code = status.HTTP_200_OK
    return doc


@router.put("/update", response_model=DesignFilesRead)
@router.put("/update/{company_id}", response_model=DesignFilesRead)
def update_design_files(
    banner: UploadFile | None = File(None),
    poster: UploadFile | None = File(None),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """Replace the banner and/or poster of the company's design."""
    return designs.update_files(
        session,
        storage,
        target.id,
        banner=read_upload(banner),
        poster=read_upload(poster),
    )
