from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from esnaf_defterim.api.deps import AuthContext, PageParams, page_params, paginate, require_permission
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.user import User, UserRole
from esnaf_defterim.schemas.common import Envelope, Page
from esnaf_defterim.schemas.user import UserOut, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=Envelope[Page[UserOut]])
def list_users(
    params: PageParams = Depends(page_params),
    include_inactive: bool = False,
    _: AuthContext = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    query = select(User).order_by(User.name.asc())
    if not include_inactive:
        query = query.where(User.is_active.is_(True))
    users, pagination = paginate(db, query, params)
    return Envelope(data=Page(items=[UserOut.model_validate(u) for u in users], pagination=pagination))


@router.patch("/{user_id}", response_model=Envelope[UserOut])
def update_user(
    user_id: int,
    payload: UserUpdate,
    ctx: AuthContext = Depends(require_permission("users:manage")),
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.id == ctx.user_id and (payload.is_active is False or payload.role not in (None, UserRole.ADMIN)):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot demote or deactivate themselves",
        )

    if payload.name is not None:
        user.name = payload.name.strip()
    if payload.phone is not None:
        user.phone = payload.phone.strip() or None
    if payload.role is not None:
        user.role = payload.role
    if payload.is_active is not None:
        user.is_active = payload.is_active
    db.commit()
    db.refresh(user)
    return Envelope(message="User updated", data=UserOut.model_validate(user))
