"""Password hashing and bearer tokens."""

from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext

from umutisafe.config import settings


# New hashes use PBKDF2; bcrypt hashes from older accounts still verify
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated="auto")

ALGORITHM = "HS256"
BCRYPT_MAX_PASSWORD_LENGTH = 72


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password[:BCRYPT_MAX_PASSWORD_LENGTH])


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for hashes passlib cannot identify."""
    try:
        return pwd_context.verify(plain_password[:BCRYPT_MAX_PASSWORD_LENGTH], hashed_password)
    except ValueError:
        return False


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign `claims` with HS256, adding an ``exp`` claim.

    Tokens live ``ACCESS_TOKEN_EXPIRE_DAYS`` unless `expires_delta` is given.

    Raises:
        ValueError: when SECRET_KEY is empty
    """
    if not settings.SECRET_KEY:
        raise ValueError("SECRET_KEY is not configured")

    lifetime = expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    payload = {**claims, "exp": datetime.utcnow() + lifetime}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user_id: Any) -> str:
    return create_access_token({"sub": str(user_id)})


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry, raising 401 on any failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
