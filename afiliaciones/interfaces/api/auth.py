"""Auth API routes — login."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from afiliaciones.application.services.auth_service import authenticate_user, build_login_response
from afiliaciones.config import Settings
from afiliaciones.core.exceptions import UnauthorizedException
from afiliaciones.domain.schemas.auth import LoginRequest, LoginResponse
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.deps import get_app_settings

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    user = authenticate_user(db, body.username, body.password)
    if not user:
        raise UnauthorizedException("Usuario o contraseña incorrectos")
    return build_login_response(user, settings)
