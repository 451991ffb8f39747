# feria/services/auth_service.py
import logging

from sqlmodel import Session

from feria.core.errors import AuthenticationError, NotFoundError
from feria.core.security import TokenService, verify_password
from feria.models.user import User
from feria.repositories.user_repo import UserRepository
from feria.schemas.auth import SessionClaims, SessionUser

logger = logging.getLogger(__name__)


def claims_for_user(user: User) -> SessionClaims:
    """
    Build the canonical claim set for a stored user.

    This is the only place claims are assembled; login, token login and
    claim refresh all go through it.
    """
    return SessionClaims(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        design_complete=user.design_complete,
        information_complete=user.information_complete,
    )


class AuthService:
    """
    Session establishment and claim refresh.

    Responsibilities:
      - resolve a login by name or email and check the password
      - issue tokens from the canonical claims
      - re-issue tokens after a profile-completion flag changed
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def authenticate(self, session: Session, name_or_email: str, password: str) -> User:
        """
        Find the user by name, else by email, and verify the password.

        Raises:
            AuthenticationError(401): `user_not_found` / `invalid_password`.
        """
        by_name = self.repo.get_by_name(session, name_or_email)
        by_email = self.repo.get_by_email(session, name_or_email)
        user = by_name or by_email

        if user is None:
            raise AuthenticationError("user_not_found", "User not found")

        if not verify_password(password, user.password_hash):
            logger.info("Rejected login for user %s: wrong password", user.id)
            raise AuthenticationError("invalid_password", "Password invalid.")

        return user

    def issue(self, tokens: TokenService, user: User) -> str:
        return tokens.issue(claims_for_user(user))

    def refresh(self, session: Session, tokens: TokenService, user_id: str) -> str:
        """
        Re-read the user and issue a token carrying its current flags.

        Raises:
            NotFoundError(404): the user vanished in between.
        """
        user = self.repo.get_by_id(session, user_id)
        if user is None:
            raise NotFoundError("user_not_found", "User not found")
        session.refresh(user)
        return self.issue(tokens, user)

    @staticmethod
    def summary(user: User) -> SessionUser:
        return SessionUser(id=user.id, name=user.name, role=user.role)
