"""FastAPI dependencies: database session, current user and role guards."""

import logging
from typing import Callable, Generator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.roles import Role
from app.core.security import get_token_user_id
from app.crud import crud_user
from app.database import SessionLocal
from app.models.user import User

logger = logging.getLogger(__name__)

# OAuth2 Bearer token scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def get_db() -> Generator[Session, None, None]:
    """Yield a session that is closed after the request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the bearer token to a stored user.

    The role is read from the database on every request, so a role change
    takes effect without a new login.

    Raises:
        HTTPException: 401 if the token is invalid or names no user
    """
    try:
        user_id = get_token_user_id(token)
    except HTTPException:
        logger.warning("[AUTH] Rejected bearer token")
        raise

    user = crud_user.get(db, user_id)
    if user is None:
        logger.warning(f"[AUTH] Token for unknown user id: {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


def require_role(*allowed_roles) -> Callable:
    """
    Build a dependency that admits only users holding one of ``allowed_roles``.

    Roles may be given as :class:`Role` members or their string values.

    Example:
        @router.get("/users")
        def list_users(current_user: User = Depends(require_role(Role.SERVER_ADMIN))):
            ...
    """
    allowed = {str(getattr(role, "value", role)) for role in allowed_roles}

    def role_checker(
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        if current_user.role not in allowed:
            logger.warning(f"[AUTH] Role {current_user.role!r} denied; requires {sorted(allowed)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Not enough permissions. Required role(s): {', '.join(sorted(allowed))}"
            )
        return current_user

    return role_checker


require_admin = require_role(Role.SERVER_ADMIN)


__all__ = [
    "oauth2_scheme",
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "require_role",
    "require_admin",
]
