from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from songbird.api.deps import AuthContext, get_db, get_current_user, require_admin
from songbird.core.security import get_password_hash, verify_password
from songbird.db.models.users import Users, UserRole, OPEN_SHIFT_USERNAME
from songbird.schemas.users import PasswordChange, ProfileUpdate, UserCreate, UserUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["users"])

MIN_PASSWORD_LENGTH = 8


def _get_staff_or_404(db: Session, user_id: int) -> Users:
    user = db.query(Users).filter(Users.id == user_id).first()
    if not user or user.is_system:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/me", response_model=UserResponse)
def get_me(current_user: Users = Depends(get_current_user)):
    return current_user


@router.put("/me", response_model=UserResponse)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: Users = Depends(get_current_user),
):
    """Staff edit their own profile. Role, title and Telegram link stay admin-only."""
    if payload.full_name is None or not payload.full_name.strip():
        raise HTTPException(status_code=400, detail="No fields to update")

    current_user.full_name = payload.full_name.strip()
    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: Users = Depends(get_current_user),
):
    if not verify_password(payload.current_password, current_user.password_hash):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    current_user.password_hash = get_password_hash(payload.new_password)
    db.commit()


@router.get("", response_model=List[UserResponse])
def list_users(
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_user: Users = Depends(get_current_user),
):
    """Staff listing. The open-shift placeholder never appears here."""
    query = db.query(Users).filter(
        Users.role != UserRole.SYSTEM,
        Users.username != OPEN_SHIFT_USERNAME,
    )
    if not include_inactive:
        query = query.filter(Users.is_active == True)
    return query.order_by(Users.full_name).all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    username = payload.username.strip().lower()
    if username == OPEN_SHIFT_USERNAME or payload.role == UserRole.SYSTEM:
        raise HTTPException(status_code=400, detail="Reserved username or role")

    existing = db.query(Users).filter(Users.username == username).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username already exists")

    user = Users(
        username=username,
        full_name=payload.full_name,
        password_hash=get_password_hash(payload.password),
        role=payload.role,
        job_title=payload.job_title,
        telegram_id=payload.telegram_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    admin: AuthContext = Depends(require_admin),
):
    user = _get_staff_or_404(db, user_id)

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("role") == UserRole.SYSTEM:
        raise HTTPException(status_code=400, detail="Reserved username or role")
    if update_data.get("is_active") is False and user.role == UserRole.ADMIN:
        raise HTTPException(status_code=400, detail="Cannot deactivate admin users")

    password = update_data.pop("password", None)
    if password:
        user.password_hash = get_password_hash(password)

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user
