"""User API routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from afiliaciones.application.services.auth_service import create_user
from afiliaciones.domain.schemas.auth import UserCreate, UserCreated
from afiliaciones.infrastructure.database import get_db

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def register_user(body: UserCreate, db: Session = Depends(get_db)):
    """Create a user with an optional office association."""
    return UserCreated(user=create_user(db, body))
