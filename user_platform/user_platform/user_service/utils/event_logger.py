"""
Event logger utility for authentication events.
"""
from typing import Optional
import logging

from fastapi import Request

from ..models import User

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "token_rejected",
}


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For hop."""
    if request.client and request.client.host:
        return request.client.host
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    request: Request,
    user: Optional[User] = None,
    email: Optional[str] = None,
) -> None:
    """
    Log an authentication event.

    Passwords and token values are never passed here, so they never reach
    the log.

    Args:
        event_type: One of: register, login_success, login_failure, token_rejected
        request: FastAPI Request object
        user: The user involved, when known
        email: Email supplied by the client, for events without a user

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.WARNING if event_type in ("login_failure", "token_rejected") else logging.INFO
    logger.log(
        level,
        "AUTH %s user_id=%s email=%s ip=%s user_agent=%s",
        event_type,
        user.id if user is not None else None,
        user.email if user is not None else email,
        client_ip(request),
        request.headers.get("user-agent"),
    )
