"""Request-scoped dependencies: database session, caller identity, role guard."""

import logging
from typing import Callable, Generator
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from umutisafe.core.exceptions import AccountDeactivatedException, ForbiddenException
from umutisafe.core.security import decode_token
from umutisafe.crud import crud_user
from umutisafe.models.user import User

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session from the factory `create_app` put on ``app.state``."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def _token_failed() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized, token failed",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token's ``sub`` claim to a user.

    Raises:
        HTTPException: 401 for a bad or expired token, a subject that is not
            a UUID, or a user that no longer exists
    """
    payload = decode_token(token)
    try:
        user_id = UUID(str(payload["sub"]))
    except (KeyError, ValueError):
        logger.warning("[AUTH] Token subject missing or not a user id")
        raise _token_failed()

    user = crud_user.get(db, user_id)
    if user is None:
        logger.warning(f"[AUTH] Token subject {user_id} has no account")
        raise _token_failed()
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise AccountDeactivatedException()
    return current_user


def require_role(*allowed_roles: str) -> Callable:
    """
    Build a dependency that admits active users holding one of `allowed_roles`.

    Example:
        @router.get("/stats")
        async def stats(current_user: User = Depends(require_role("admin"))):
            ...
    """
    async def role_checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed_roles:
            raise ForbiddenException(f"User role '{current_user.role}' is not authorized to access this route")
        return current_user

    return role_checker


__all__ = [
    "oauth2_scheme",
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "require_role",
]
