"""
Auth Router - registration and login, both answering with a bearer token envelope.
"""
import logging

from fastapi import APIRouter, Depends, Request, status

from ..auth import REGISTRATION_TOKEN_NAME, LOGIN_TOKEN_NAME, CredentialVerifier, SessionTokenIssuer, hash_password
from ..dependencies import get_credential_verifier, get_token_issuer, get_user_repository
from ..errors import AuthenticationFailed, DuplicateEmail
from ..repositories import UserRepository
from ..schemas import MessageResponse, Token, UserCreate, UserLogin
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/api", tags=["auth"])
logger = logging.getLogger(__name__)

VALIDATION_RESPONSE = {
    "description": "Invalid input, as a mapping of field name to messages",
    "content": {"application/json": {"example": {"email": ["The email field is required."]}}},
}


@router.post(
    "/login",
    response_model=Token,
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse, "description": "Invalid credentials"},
        422: VALIDATION_RESPONSE,
    },
)
def login(
    credentials: UserLogin,
    request: Request,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
):
    """Log a user in; `remember_me` extends the token lifetime to one week."""
    user = verifier.verify(credentials.email, credentials.password)
    if user is None:
        log_auth_event("login_failure", request, email=credentials.email)
        raise AuthenticationFailed()

    envelope = issuer.issue(user, extended=credentials.remember_me, name=LOGIN_TOKEN_NAME)
    log_auth_event("login_success", request, user=user)
    return envelope.to_response()


@router.post(
    "/register",
    response_model=Token,
    responses={422: VALIDATION_RESPONSE},
)
def register(
    payload: UserCreate,
    request: Request,
    users: UserRepository = Depends(get_user_repository),
    issuer: SessionTokenIssuer = Depends(get_token_issuer),
):
    """Create a user and hand back its first access token."""
    if users.find_by_email(payload.email) is not None:
        raise DuplicateEmail(payload.email)

    user = users.create(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    envelope = issuer.issue(user, extended=False, name=REGISTRATION_TOKEN_NAME)
    log_auth_event("register", request, user=user)
    return envelope.to_response()
