# feria/repositories/user_repo.py
from sqlmodel import Session, select

from feria.models.user import Logo, User


class UserRepository:
    """
    Data access layer for User and Logo.

    Responsibilities:
      - Pure DB operations (CRUD + equality queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Users -----

    def get_by_id(self, session: Session, user_id: str) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_name(self, session: Session, name: str) -> User | None:
        stmt = select(User).where(User.name == name)
        return session.exec(stmt).first()

    def get_by_email(self, session: Session, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list(self, session: Session, role: str | None = None) -> list[User]:
        """All users, optionally only those with the given role."""
        stmt = select(User)
        if role is not None:
            stmt = stmt.where(User.role == role)
        return list(session.exec(stmt.order_by(User.created_at)).all())

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        session.delete(user)
        session.commit()

    # ----- Logos -----

    def get_logo(self, session: Session, company_id: str) -> Logo | None:
        stmt = select(Logo).where(Logo.company_id == company_id)
        return session.exec(stmt).first()

    def save_logo(self, session: Session, logo: Logo) -> Logo:
        session.add(logo)
        session.commit()
        session.refresh(logo)
        return logo
