"""Authentication endpoints."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_current_active_user, get_db
from umutisafe.core.exceptions import (
    AccountDeactivatedException,
    AccountPendingApprovalException,
    ConflictException,
    InvalidCredentialsException,
)
from umutisafe.core.security import create_user_token, verify_password
from umutisafe.crud import crud_user
from umutisafe.crud.user import check_email_domain
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse
from umutisafe.schemas.user import (
    AuthPayload,
    LoginPayload,
    LoginUserResponse,
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserLogin,
    UserResponse,
)
from umutisafe.services.account_notifications import account_notification_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)


@router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
async def register(
    user_in: UserCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
) -> dict:
    """
    Register a new account.

    Admin accounts are approved immediately and receive a token. Every other
    role is created unapproved, gets a "pending approval" email and no token.

    Raises:
        HTTPException: 400 on an email domain that does not fit the role,
            409 if the email is already registered
    """
    check_email_domain(user_in.email, user_in.role)

    if crud_user.get_by_email(db, user_in.email):
        raise ConflictException("User already exists with this email")

    user = crud_user.create_user(db, user_in=user_in)
    logger.info(f"[AUTH] Registered user {user.id} with role {user.role}")

    if not user.is_approved:
        background_tasks.add_task(
            account_notification_service.notify_registration_pending,
            name=user.name,
            email=user.email,
        )

    payload = AuthPayload(
        user=UserResponse.model_validate(user),
        token=create_user_token(user.id) if user.is_approved else None,
    )
    message = (
        "User registered successfully"
        if user.is_approved
        else "Registration successful! Your account is pending approval. You will receive an email once approved."
    )
    return {"success": True, "message": message, "data": payload}


@router.post(
    "/login",
    response_model=ApiResponse[LoginPayload],
    status_code=status.HTTP_200_OK,
    summary="Login user",
)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
) -> dict:
    """
    Login with email and password.

    Unknown email and wrong password share one 401 message. Deactivated
    accounts get 401, accounts still waiting for approval get 403.
    """
    user = crud_user.authenticate(db, email=credentials.email, password=credentials.password)
    if user is None:
        logger.info(f"[AUTH] Failed login for {credentials.email}")
        raise InvalidCredentialsException()

    if not user.is_active:
        raise AccountDeactivatedException()

    if not user.is_approved:
        raise AccountPendingApprovalException()

    previous_last_login = crud_user.record_login(db, user=user)

    user_data = LoginUserResponse.model_validate(user).model_copy(
        update={
            "has_logged_before": previous_last_login is not None,
            "previous_last_login": previous_last_login,
        }
    )
    return {
        "success": True,
        "message": "Login successful",
        "data": LoginPayload(user=user_data, token=create_user_token(user.id)),
    }


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Get current user",
)
async def read_me(current_user: User = Depends(get_current_active_user)) -> dict:
    return {"success": True, "data": UserResponse.model_validate(current_user)}


@router.put(
    "/profile",
    response_model=ApiResponse[UserResponse],
    summary="Update own profile",
)
async def update_profile(
    profile_in: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    # Empty values leave the stored field untouched
    update_data = {k: v for k, v in profile_in.model_dump(exclude_unset=True).items() if v}
    user = crud_user.update(db, db_obj=current_user, obj_in=update_data)
    return {
        "success": True,
        "message": "Profile updated successfully",
        "data": UserResponse.model_validate(user),
    }


@router.put(
    "/change-password",
    response_model=ApiResponse[None],
    summary="Change password",
)
async def change_password(
    password_in: PasswordChange,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
) -> dict:
    if not verify_password(password_in.current_password, current_user.password_hash):
        raise InvalidCredentialsException("Current password is incorrect")

    crud_user.update_password(db, user=current_user, new_password=password_in.new_password)
    logger.info(f"[AUTH] Password changed for user {current_user.id}")
    return {"success": True, "message": "Password changed successfully"}
