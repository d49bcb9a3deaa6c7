from dataclasses import dataclass
from enum import Enum
from typing import Generator
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from songbird.db.database import SessionLocal
from songbird.core.security import decode_access_token
from songbird.db.models.users import Users, UserRole

security = HTTPBearer()


class Role(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


@dataclass
class AuthContext:
    """Who is making the request. Built per request from the bearer token."""
    user_id: int
    role: Role
    full_name: str
    user: Users

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Users:
    token_data = decode_access_token(credentials.credentials)
    if token_data is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user = db.query(Users).filter(Users.id == token_data.user_id).first()
    if not user or user.is_system:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account disabled")

    return user


def get_auth_context(current_user: Users = Depends(get_current_user)) -> AuthContext:
    role = Role.ADMIN if current_user.role == UserRole.ADMIN else Role.STAFF
    return AuthContext(
        user_id=current_user.id,
        role=role,
        full_name=current_user.full_name,
        user=current_user,
    )


def require_admin(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Require the ADMIN role"""
    if not auth.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return auth
