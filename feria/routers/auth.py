# feria/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from feria.core.auth import clear_session_cookie, require_identity, set_session_cookie
from feria.core.security import TokenService, get_token_service
from feria.database import get_session
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import Identity, LoginRequest, LoginResponse, TokenLoginResponse
from feria.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = UserRepository()
service = AuthService(repo)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Browser login by name or email.

    On success the session token is set as an HttpOnly cookie; the body only
    carries a user summary.
    """
    user = service.authenticate(session, payload.name_or_email, payload.password)
    set_session_cookie(response, service.issue(tokens, user))
    return LoginResponse(message="Login successful", user=service.summary(user))


@router.post("/logging/unity", response_model=TokenLoginResponse)
def token_login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Login for clients that cannot keep cookies (the Unity stand viewer).

    Returns the token in the body; callers send it back as
    `Authorization: Bearer <token>`.
    """
    user = service.authenticate(session, payload.name_or_email, payload.password)
    return TokenLoginResponse(
        message="Login successful",
        token=service.issue(tokens, user),
        user=service.summary(user),
    )


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"message": "Logout successful"}


@router.get("/me", response_model=Identity)
def read_me(identity: Identity = Depends(require_identity)):
    """Return the identity carried by the caller's token."""
    return identity
