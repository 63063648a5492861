"""FastAPI dependency — JWT auth."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from afiliaciones.application.services.auth_service import decode_access_token, get_user_by_username
from afiliaciones.config import Settings
from afiliaciones.core.exceptions import UnauthorizedException
from afiliaciones.domain.models.user import User
from afiliaciones.infrastructure.database import get_db
from afiliaciones.interfaces.deps import get_app_settings

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """Extract and validate the current user from the bearer token."""
    if credentials is None:
        raise UnauthorizedException("Token no proporcionado")

    payload = decode_access_token(credentials.credentials, settings)
    if payload is None:
        raise UnauthorizedException("Token inválido o expirado")

    username: str = payload.get("sub")
    if username is None:
        raise UnauthorizedException("Token inválido")

    user = get_user_by_username(db, username)
    if user is None or not user.is_active:
        raise UnauthorizedException("Usuario no encontrado o inactivo")

    return user
