import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, get_auth_context, require_permission
from esnaf_defterim.core.config import settings
from esnaf_defterim.core.security import create_access_token, hash_password, verify_password
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.user import User
from esnaf_defterim.schemas.auth import ChangePasswordRequest, LoginData, LoginRequest, RegisterRequest
from esnaf_defterim.schemas.common import Envelope
from esnaf_defterim.schemas.user import UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def authenticate_user(db: Session, email: str, password: str) -> User:
    user = db.scalar(select(User).where(func.lower(User.email) == email.lower()))
    if not user or not verify_password(password, user.password_hash):
        logger.info("login failed for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        logger.info("login refused for inactive user %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated",
        )

    user.last_login_at = datetime.utcnow()
    db.commit()
    db.refresh(user)
    return user


@router.post("/login", response_model=Envelope[LoginData])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    token = create_access_token(user_id=user.id, email=user.email, role=user.role.value)
    logger.info("user %s logged in", user.id)
    return Envelope(
        message="Login successful",
        data=LoginData(
            token=token,
            expires_in=settings.access_token_expire_minutes * 60,
            user=UserOut.model_validate(user),
        ),
    )


@router.get("/me", response_model=Envelope[UserOut])
def me(ctx: AuthContext = Depends(get_auth_context)):
    return Envelope(data=UserOut.model_validate(ctx.user))


@router.get("/profile", response_model=Envelope[UserOut])
def profile(ctx: AuthContext = Depends(get_auth_context)):
    return Envelope(data=UserOut.model_validate(ctx.user))


@router.post("/verify-token", response_model=Envelope[UserOut])
def verify_token(ctx: AuthContext = Depends(get_auth_context)):
    return Envelope(message="Token is valid", data=UserOut.model_validate(ctx.user))


@router.put("/change-password", response_model=Envelope[None])
def change_password(
    payload: ChangePasswordRequest,
    ctx: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    user = ctx.user
    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Current password is incorrect")

    user.password_hash = hash_password(payload.new_password)
    db.commit()
    logger.info("user %s changed password", user.id)
    return Envelope(message="Password updated")


@router.post("/register", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    _: AuthContext = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    existing = db.scalar(select(User).where(func.lower(User.email) == payload.email))
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email address is already in use")

    user = User(
        name=payload.name.strip(),
        email=payload.email,
        phone=payload.phone.strip() if payload.phone else None,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email address is already in use") from exc
    db.refresh(user)
    logger.info("registered user %s with role %s", user.id, user.role.value)
    return Envelope(message="User created", data=UserOut.model_validate(user))
