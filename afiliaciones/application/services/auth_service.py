"""Auth service — JWT token management, password hashing and office access."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from afiliaciones.config import Settings
from afiliaciones.core.exceptions import ConflictException, ValidationException
from afiliaciones.domain.models.office import Office, UserOffice
from afiliaciones.domain.models.user import User, UserRole
from afiliaciones.domain.schemas.auth import LoginResponse, OfficeRead, UserCreate, UserRead
from afiliaciones.infrastructure.database import transaction

logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    user = get_user_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        return None
    return user


def user_has_office_access(db: Session, user_id: int, office_id: int) -> bool:
    return (
        db.query(UserOffice)
        .filter(UserOffice.user_id == user_id, UserOffice.office_id == office_id)
        .first()
        is not None
    )


def build_login_response(user: User, settings: Settings) -> LoginResponse:
    token = create_access_token({"sub": user.username, "id": user.id, "role": user.role}, settings)
    offices = [
        OfficeRead(
            office_id=o.id,
            name=o.name,
            representative_name=o.representative_name,
            logo_url=o.logo_url,
        )
        for o in user.offices
    ]
    return LoginResponse(id=user.id, username=user.username, role=user.role, offices=offices, token=token)


def create_user(db: Session, body: UserCreate) -> UserRead:
    """Create a user and, optionally, grant it access to one office."""
    if body.office_id is not None and db.get(Office, body.office_id) is None:
        raise ValidationException("La oficina indicada no existe.", {"officeId": body.office_id})

    try:
        with transaction(db):
            if get_user_by_username(db, body.username) is not None:
                raise ConflictException("El nombre de usuario ya existe. Por favor, elige otro.")
            user = User(
                username=body.username,
                password_hash=hash_password(body.password),
                role=UserRole(body.role).value,
            )
            db.add(user)
            db.flush()
            if body.office_id is not None:
                db.add(UserOffice(user_id=user.id, office_id=body.office_id))
    except IntegrityError:
        raise ConflictException("El nombre de usuario ya existe. Por favor, elige otro.")

    db.refresh(user)
    logger.info("User created", user_id=user.id, username=user.username, office_id=body.office_id)
    return UserRead.model_validate(user).model_copy(update={"office_id": body.office_id})


def ensure_default_admin(db: Session, settings: Settings) -> Optional[User]:
    """Seed an admin account when the users table is empty."""
    if db.query(User.id).first() is not None:
        return None
    with transaction(db):
        admin = User(
            username=settings.DEFAULT_ADMIN_USERNAME,
            password_hash=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=UserRole.ADMIN.value,
        )
        db.add(admin)
    logger.info("Default admin user created", username=admin.username)
    return admin
