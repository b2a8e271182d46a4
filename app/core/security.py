"""Password hashing and JWT bearer tokens.

Tokens carry the user id in ``sub``. The role claim is informational only;
authorization always reads the role stored on the user row.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings


# Password hashing context
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# JWT settings
ALGORITHM = "HS256"


def _credentials_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password; unknown hash schemes count as a mismatch."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed access token.
    
    Args:
        data: Token claims, e.g. ``{"sub": "42", "role": "ECG講師"}``
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_HOURS
    
    Raises:
        ValueError: SECRET_KEY is not configured
    """
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY environment variable is not set")
    
    lifetime = expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; raises a 401 HTTPException on failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise _credentials_error() from e


def get_token_user_id(token: str) -> int:
    """Return the user id carried in ``sub``; raises a 401 HTTPException if absent or malformed."""
    subject = decode_token(token).get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError) as e:
        raise _credentials_error() from e
