"""Custom exceptions for the UmutiSafe application.

Every class is an ``HTTPException`` so route code can simply ``raise`` and
the handlers in ``umutisafe.main`` render the uniform response envelope.
"""

from fastapi import HTTPException, status


class BadRequestException(HTTPException):
    """Malformed input or a rule violation the caller can fix (400)."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundException(HTTPException):
    """Referenced entity does not exist or is not visible to the caller (404)."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictException(HTTPException):
    """Duplicate or already-applied state change (409)."""

    def __init__(self, detail: str = "Conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenException(HTTPException):
    def __init__(self, detail: str = "Not authorized to access this resource"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidCredentialsException(HTTPException):
    """Unknown email or wrong password; both share one message."""

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AccountDeactivatedException(HTTPException):
    def __init__(self, detail: str = "Account is deactivated. Please contact administrator."):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class AccountPendingApprovalException(HTTPException):
    """
    Account exists and is active but an admin has not approved it yet.

    Status Code: 403 Forbidden (the client may retry after approval)
    """

    def __init__(
        self,
        detail: str = "Your account is pending approval. You will receive an email once your account is approved.",
    ):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class SelfModificationException(BadRequestException):
    """Admin tried to delete, deactivate or reject their own account."""

    def __init__(self, action: str = "modify"):
        super().__init__(detail=f"You cannot {action} your own account")


__all__ = [
    "BadRequestException",
    "NotFoundException",
    "ConflictException",
    "ForbiddenException",
    "InvalidCredentialsException",
    "AccountDeactivatedException",
    "AccountPendingApprovalException",
    "SelfModificationException",
]
