from fastapi import APIRouter, Depends
from sqlmodel import Session

from recipebook.schemas.user import UserCreate, UserRead
from recipebook.services.users import register_user
from recipebook.storage.db import session_dependency

router = APIRouter()


@router.post("/users", response_model=UserRead, status_code=201)
def create_user(payload: UserCreate, session: Session = Depends(session_dependency)) -> UserRead:
    user = register_user(session, **payload.model_dump())
    return UserRead(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
    )
