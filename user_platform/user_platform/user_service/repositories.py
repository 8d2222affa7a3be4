"""
Storage ports for users and access tokens, plus their SQLAlchemy implementations.

Route handlers and the auth components only see the abstract repositories;
the SQLAlchemy-backed ones are wired in through FastAPI dependencies.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import DuplicateEmail
from .models import AccessToken, User

MAX_ID = 2 ** 63 - 1
MIN_ID = -(2 ** 63)


class UserRepository(ABC):
    """Port for user persistence operations."""

    @abstractmethod
    def create(self, name: str, email: str, password_hash: str) -> User:
        """
        Persist a new user.

        Args:
            name: Display name
            email: Login identifier, unique among users
            password_hash: Already hashed password

        Returns:
            The stored user, with its id assigned

        Raises:
            DuplicateEmail: If another user already holds the email
        """

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[User]:
        """Return the user with this primary key, or None."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user whose email matches exactly, or None."""

    @abstractmethod
    def list_all(self) -> List[User]:
        """Return every user, ordered by id."""


class TokenRepository(ABC):
    """Port for access token persistence operations."""

    @abstractmethod
    def add(self, token: AccessToken) -> AccessToken:
        """
        Persist a new access token.

        Raises:
            IntegrityError: If the token value is already taken
        """

    @abstractmethod
    def find_by_token(self, value: str) -> Optional[AccessToken]:
        """Return the token record holding this value, or None."""

    @abstractmethod
    def exists(self, value: str) -> bool:
        """Check whether a token value is already in use."""


class SqlAlchemyUserRepository(UserRepository):

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str, email: str, password_hash: str) -> User:
        user = User(name=name, email=email, password=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race against a concurrent registration for the same email
            self.db.rollback()
            if self.db.query(User.id).filter(User.email == email).first() is not None:
                raise DuplicateEmail(email) from exc
            raise
        self.db.refresh(user)
        return user

    def find_by_id(self, user_id: int) -> Optional[User]:
        # Ids outside the signed 64-bit range cannot be bound as an INTEGER
        if not MIN_ID <= user_id <= MAX_ID:
            return None
        return self.db.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id.asc()).all()


class SqlAlchemyTokenRepository(TokenRepository):

    def __init__(self, db: Session):
        self.db = db

    def add(self, token: AccessToken) -> AccessToken:
        self.db.add(token)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(token)
        return token

    def find_by_token(self, value: str) -> Optional[AccessToken]:
        return self.db.query(AccessToken).filter(AccessToken.token == value).first()

    def exists(self, value: str) -> bool:
        return self.db.query(AccessToken.id).filter(AccessToken.token == value).first() is not None
