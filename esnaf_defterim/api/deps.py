import math
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from esnaf_defterim.core.config import settings
from esnaf_defterim.core.security import decode_token
from esnaf_defterim.db.database import get_db
from esnaf_defterim.models.user import User, UserRole
from esnaf_defterim.schemas.common import Pagination

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login", auto_error=False)

ROLE_PERMISSIONS: dict[UserRole, set[str]] = {
    UserRole.ADMIN: {
        "stock:view",
        "stock:manage",
        "catalog:manage",
        "sales:view",
        "sales:create",
        "cash:view",
        "cash:manage",
        "users:manage",
    },
    UserRole.CLERK: {"stock:view", "stock:manage", "catalog:manage", "sales:view", "sales:create", "cash:view"},
    UserRole.REGULAR: {"stock:view", "stock:manage"},
}


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, resolved once per request and handed to handlers."""

    user: User

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def role(self) -> UserRole:
        return self.user.role

    def can(self, permission: str) -> bool:
        return permission in ROLE_PERMISSIONS.get(self.user.role, set())


def get_auth_context(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    raw_token = token
    if not raw_token:
        # Tolerate clients that send the raw token without the "Bearer " prefix.
        header = request.headers.get("authorization", "").strip()
        if header and " " not in header:
            raw_token = header
    if not raw_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_token(raw_token)
        user_id = int(payload["sub"])
        if payload.get("type") != "access":
            raise ValueError("not an access token")
    except (JWTError, KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token") from exc

    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or inactive user",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return AuthContext(user=user)


def require_permission(permission: str):
    def checker(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if not ctx.can(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission required: {permission}",
            )
        return ctx

    return checker


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> PageParams:
    return PageParams(page=page, limit=limit)


def paginate(db: Session, query, params: PageParams) -> tuple[list, Pagination]:
    total = db.scalar(select(func.count()).select_from(query.order_by(None).subquery())) or 0
    items = list(db.scalars(query.limit(params.limit).offset(params.offset)).all())
    pagination = Pagination(
        page=params.page,
        limit=params.limit,
        total=total,
        pages=math.ceil(total / params.limit),
    )
    return items, pagination
