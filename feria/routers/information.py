# feria/routers/information.py
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from sqlmodel import Session

from feria.core.auth import Subject, SubjectPolicy, set_session_cookie, subject
from feria.core.security import TokenService, get_token_service
from feria.core.storage import StorageService, get_storage, read_upload
from feria.database import get_session
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.information import DocumentsKeep, EventCreate, InformationRead, InformationUpdate
from feria.services.auth_service import AuthService
from feria.services.information_service import InformationService, parse_links, parse_names

router = APIRouter(prefix="/information", tags=["Information"])

users = UserRepository()
service = InformationService(CompanyRepository(), users, AuthService(users))

owner_write = subject(
    SubjectPolicy.ADMIN_OVERRIDE,
    deny_visitor="visitors cannot manage company information",
)
public_read = subject(SubjectPolicy.SELF_OR_PUBLIC)


def _uploads(files: list[UploadFile] | None):
    return [u for u in (read_upload(f) for f in files or []) if u is not None]


# -------- Information page --------


@router.post("/addInfo", status_code=status.HTTP_201_CREATED)
@router.post("/addInfo/{company_id}", status_code=status.HTTP_201_CREATED)
def add_information(
    response: Response,
    description: str = Form(...),
    additional_information: str | None = Form(None),
    sector: str | None = Form(None),
    links: str | None = Form(None),
    documents: list[UploadFile] | None = File(None),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Create the company's information page (multipart form).

    `links` is a JSON list of {additionalButtonTitle, additionalButtonLink}.
    Marks the information as complete and, when the company edits its own
    page, replaces the session cookie.
    """
    info, token = service.add_information(
        session,
        storage,
        tokens,
        target,
        description,
        additional_information=additional_information,
        sector=sector,
        links=parse_links(links),
        documents=_uploads(documents),
    )
    if token:
        set_session_cookie(response, token)
    return {"message": "Information company added successfully", "id": info.id}


@router.get("/getInfo", response_model=InformationRead)
@router.get("/getInfo/{company_id}", response_model=InformationRead)
def get_information(
    target: Subject = Depends(public_read),
    session: Session = Depends(get_session),
):
    return service.get_information(session, target.id)


@router.put("/updateInfo", response_model=InformationRead)
@router.put("/updateInfo/{company_id}", response_model=InformationRead)
def update_information(
    payload: InformationUpdate,
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
):
    return service.update_information(session, target.id, payload)


# -------- Documents --------


@router.put("/deleteDocuments", response_model=InformationRead)
@router.put("/deleteDocuments/{company_id}", response_model=InformationRead)
def delete_documents(
    payload: DocumentsKeep,
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    Keep only the listed documents; the stored files of the others are deleted.
    """
    keep = [doc.file_name for doc in payload.documents_to_keep]
    return service.delete_documents(session, storage, target.id, keep)


@router.put("/updateDocuments", response_model=InformationRead)
@router.put("/updateDocuments/{company_id}", response_model=InformationRead)
def update_documents(
    keep: str | None = Form(None),
    documents: list[UploadFile] | None = File(None),
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
    storage: StorageService = Depends(get_storage),
):
    """
    `keep` is a JSON list of file names to retain; `documents` are appended.
    """
    return service.update_documents(
        session,
        storage,
        target.id,
        parse_names(keep),
        _uploads(documents),
    )


# -------- Calendar events --------


@router.post("/events", status_code=status.HTTP_201_CREATED)
@router.post("/events/{company_id}", status_code=status.HTTP_201_CREATED)
def add_event(
    payload: EventCreate,
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
):
    service.add_event(session, target.id, payload)
    return {"message": "Event saved successfully"}


@router.get("/events")
@router.get("/events/{company_id}")
def get_events(
    target: Subject = Depends(public_read),
    session: Session = Depends(get_session),
):
    return {"events": service.get_events(session, target.id)}
