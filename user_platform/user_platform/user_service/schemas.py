from datetime import datetime
from typing import Annotated, Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic_core import PydanticCustomError


def _check_email_format(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise PydanticCustomError(
            "email", "value is not a valid email address: {reason}", {"reason": str(exc)}
        ) from exc
    return value


EmailAddress = Annotated[str, Field(min_length=1, max_length=255), AfterValidator(_check_email_format)]


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, examples=["John Doe"])
    email: EmailAddress = Field(examples=["user@example.com"])
    password: str = Field(min_length=8, examples=["password123"])


class UserLogin(BaseModel):
    email: EmailAddress = Field(examples=["user@example.com"])
    password: str = Field(min_length=8, examples=["password123"])
    remember_me: bool = False


class Token(BaseModel):
    access_token: str
    token_type: Literal["Bearer"] = "Bearer"
    # "YYYY-MM-DD HH:MM:SS", None when the token never expires
    expires_at: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str
