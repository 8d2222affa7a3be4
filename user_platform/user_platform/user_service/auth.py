from passlib.context import CryptContext
from datetime import datetime, timedelta
from typing import Callable, NamedTuple, Optional
import logging
import secrets

from sqlalchemy.exc import IntegrityError

from .models import AccessToken, User, utcnow
from .repositories import TokenRepository, UserRepository

logger = logging.getLogger(__name__)

TOKEN_TYPE = "Bearer"
REMEMBER_ME_TTL = timedelta(weeks=1)
EXPIRES_AT_FORMAT = "%Y-%m-%d %H:%M:%S"
TOKEN_BYTES = 40
MAX_TOKEN_ATTEMPTS = 5

LOGIN_TOKEN_NAME = "API Token"
REGISTRATION_TOKEN_NAME = "Personal Access Token"

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def generate_token_value() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)

def format_expires_at(expires_at: Optional[datetime]) -> Optional[str]:
    if expires_at is None:
        return None
    return expires_at.strftime(EXPIRES_AT_FORMAT)


class TokenEnvelope(NamedTuple):
    access_token: str
    token_type: str
    expires_at: Optional[datetime]
    user_id: int

    def to_response(self) -> dict:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "expires_at": format_expires_at(self.expires_at),
        }


class CredentialVerifier:
    """
    Checks an email/password pair against stored users.

    Unknown emails and wrong passwords give the same result, and an unknown
    email still pays for one hash verification so the two cannot be told
    apart by timing.
    """

    def __init__(self, users: UserRepository):
        self.users = users

    def verify(self, email: str, password: str) -> Optional[User]:
        user = self.users.find_by_email(email)
        if user is None:
            pwd_context.dummy_verify()
            return None
        if not verify_password(password, user.password):
            return None
        return user


class SessionTokenIssuer:
    """
    Creates and stores bearer tokens for authenticated users.

    Args:
        tokens: Store the new AccessToken rows are written to
        default_ttl: Lifetime of a normal token; None issues tokens that never expire
        clock: Returns the current naive UTC time
    """

    def __init__(
        self,
        tokens: TokenRepository,
        default_ttl: Optional[timedelta],
        clock: Callable[[], datetime] = utcnow,
    ):
        self.tokens = tokens
        self.default_ttl = default_ttl
        self.clock = clock

    def expiry_for(self, now: datetime, extended: bool) -> Optional[datetime]:
        if extended:
            return now + REMEMBER_ME_TTL
        if self.default_ttl is None:
            return None
        return now + self.default_ttl

    def issue(self, user: User, extended: bool = False, name: str = LOGIN_TOKEN_NAME) -> TokenEnvelope:
        if user.id is None:
            raise ValueError("Cannot issue a token for a user that has not been stored")

        now = self.clock()
        expires_at = self.expiry_for(now, extended)

        for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
            value = generate_token_value()
            if self.tokens.exists(value):
                continue
            record = AccessToken(
                token=value,
                user_id=user.id,
                name=name,
                created_at=now,
                expires_at=expires_at,
                revoked=False,
            )
            try:
                self.tokens.add(record)
            except IntegrityError:
                if attempt == MAX_TOKEN_ATTEMPTS:
                    raise
                logger.warning("Token value collision on insert, retrying: user_id=%s", user.id)
                continue

            logger.info(
                "Issued access token: user_id=%s name=%s extended=%s expires_at=%s",
                user.id, name, extended, format_expires_at(expires_at),
            )
            return TokenEnvelope(
                access_token=value,
                token_type=TOKEN_TYPE,
                expires_at=expires_at,
                user_id=user.id,
            )

        raise RuntimeError("Could not generate a unique access token")


class TokenAuthenticator:
    """Resolves a presented bearer token to its owning user."""

    def __init__(self, tokens: TokenRepository, clock: Callable[[], datetime] = utcnow):
        self.tokens = tokens
        self.clock = clock

    def authenticate(self, value: str) -> Optional[User]:
        if not value:
            return None
        record = self.tokens.find_by_token(value)
        if record is None or not record.is_usable(self.clock()):
            return None
        return record.user
