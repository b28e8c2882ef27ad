"""Record store for user rows, behind the two operations the auth core needs."""

from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from auth_service.models.user import User


class UserStore(Protocol):
    def find_by_identity(self, user_id: int) -> User | None: ...

    def update(self, user_id: int, **fields) -> None: ...


class SqlUserStore:
    """UserStore backed by a SQLModel session (one per request)."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_identity(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def find_by_email(self, email: str) -> User | None:
        return self.session.exec(select(User).where(User.email == email)).first()

    def find_by_username(self, username: str) -> User | None:
        return self.session.exec(select(User).where(User.username == username)).first()

    def create(self, user: User) -> User:
        """Insert ``user``; raises IntegrityError on a duplicate email or username."""
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def update(self, user_id: int, **fields) -> None:
        user = self.session.get(User, user_id)
        if user is None:
            raise LookupError(f"User {user_id} not found")
        for key, value in fields.items():
            setattr(user, key, value)
        self.session.add(user)
        self.session.commit()

    def set_presence(self, user_id: int, online: bool) -> None:
        self.update(user_id, is_online=online, last_seen=datetime.now(timezone.utc))
