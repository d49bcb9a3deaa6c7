from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from songbird.api.deps import get_db
from songbird.core.security import verify_password, create_access_token
from songbird.db.models.users import Users
from songbird.schemas.auth import Token, LoginRequest

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(Users).filter(Users.username == payload.username.strip().lower()).first()
    if not user or user.is_system or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")

    token = create_access_token(data={"sub": user.id, "username": user.username})
    return Token(access_token=token)
