# feria/routers/videos.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from feria.core.auth import Subject, SubjectPolicy, subject
from feria.database import get_session
from feria.repositories.company_repo import CompanyRepository
from feria.repositories.user_repo import UserRepository
from feria.schemas.media import UrlList, VideoUrl
from feria.services.media_service import MediaService

router = APIRouter(prefix="/video", tags=["Video"])

service = MediaService(CompanyRepository(), UserRepository())

owner_write = subject(SubjectPolicy.ADMIN_OVERRIDE, deny_visitor="visitors cannot manage videos")


@router.post("/add", response_model=UrlList, status_code=status.HTTP_201_CREATED)
@router.post("/add/{company_id}", response_model=UrlList, status_code=status.HTTP_201_CREATED)
def add_video(
    payload: VideoUrl,
    response: Response,
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
):
    """
    Append a video URL. 201 when this creates the company's list, 200 after.
    """
    doc, created = service.add_video(session, target.id, payload.url)
    if not created:
        response.status_code = status.HTTP_200_OK
    return doc


@router.get("/company", response_model=UrlList)
@router.get("/company/{company_id}", response_model=UrlList)
def get_videos(
    target: Subject = Depends(subject(SubjectPolicy.SELF_OR_PUBLIC)),
    session: Session = Depends(get_session),
):
    return service.get_videos(session, target.id)


@router.delete("/delete", response_model=UrlList)
@router.delete("/delete/{company_id}", response_model=UrlList)
def delete_video(
    payload: VideoUrl,
    target: Subject = Depends(owner_write),
    session: Session = Depends(get_session),
):
    """Remove one URL from the company's video list (JSON body `{url}`)."""
    return service.delete_video(session, target.id, payload.url)
