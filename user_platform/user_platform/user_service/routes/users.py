"""
User Router - read-only user lookup for authenticated callers.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_user, get_user_repository
from ..errors import NotFound
from ..models import User
from ..repositories import UserRepository
from ..schemas import MessageResponse, UserResponse

router = APIRouter(
    prefix="/api/user",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse, "description": "Missing or invalid bearer token"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse, "description": "Internal server error"},
    },
)


@router.get("/index", response_model=List[UserResponse])
def list_users(users: UserRepository = Depends(get_user_repository)) -> List[User]:
    return users.list_all()


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": MessageResponse, "description": "User not found"}},
)
def get_user(user_id: int, users: UserRepository = Depends(get_user_repository)) -> User:
    user = users.find_by_id(user_id)
    if user is None:
        raise NotFound("User not found")
    return user
