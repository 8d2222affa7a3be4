"""
FastAPI dependencies wiring the stores and auth components into route handlers.

Handlers never build repositories themselves; tests replace any of these
through ``app.dependency_overrides``.
"""
from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from .auth import CredentialVerifier, SessionTokenIssuer, TokenAuthenticator
from .config import settings
from .db import get_db
from .errors import Unauthenticated
from .models import User
from .repositories import (
    SqlAlchemyTokenRepository,
    SqlAlchemyUserRepository,
    TokenRepository,
    UserRepository,
)
from .utils.event_logger import log_auth_event


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SqlAlchemyUserRepository(db)


def get_token_repository(db: Session = Depends(get_db)) -> TokenRepository:
    return SqlAlchemyTokenRepository(db)


def get_credential_verifier(users: UserRepository = Depends(get_user_repository)) -> CredentialVerifier:
    return CredentialVerifier(users)


def get_token_issuer(tokens: TokenRepository = Depends(get_token_repository)) -> SessionTokenIssuer:
    return SessionTokenIssuer(tokens, default_ttl=settings.token_default_ttl)


def get_token_authenticator(tokens: TokenRepository = Depends(get_token_repository)) -> TokenAuthenticator:
    return TokenAuthenticator(tokens)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def get_current_user(
    request: Request,
    authenticator: TokenAuthenticator = Depends(get_token_authenticator),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> User:
    token = bearer_token(authorization)
    if token is None:
        raise Unauthenticated()
    user = authenticator.authenticate(token)
    if user is None:
        log_auth_event("token_rejected", request)
        raise Unauthenticated()
    return user
