"""Admin endpoints: dashboard statistics, account management and global listings."""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy import extract, func, select
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_db, require_role
from umutisafe.core.exceptions import ConflictException, NotFoundException, SelfModificationException
from umutisafe.crud import crud_disposal, crud_pickup_request, crud_user
from umutisafe.crud.user import check_email_domain
from umutisafe.models.disposal import Disposal
from umutisafe.models.pickup_request import PickupRequest
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse, Pagination
from umutisafe.schemas.disposal import DISPOSAL_STATUSES, AdminDisposalResponse
from umutisafe.schemas.pickup_request import PICKUP_STATUSES, PickupRequestResponse
from umutisafe.schemas.statistics import MonthlyTrendItem, SystemStatisticsResponse, TopMedicineItem
from umutisafe.schemas.user import ALLOWED_ROLES, AdminUserUpdate, UserResponse
from umutisafe.services.account_notifications import account_notification_service
from umutisafe.utils.normalization import RISK_LEVELS

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_role("admin"))],
)

MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
TREND_MONTHS = 6
TOP_MEDICINES_LIMIT = 5


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _grouped_counts(db: Session, column, keys) -> Dict[str, int]:
    """Count rows per value of `column`, with every key in `keys` present."""
    counts = {key: 0 for key in keys}
    for value, total in db.execute(select(column, func.count()).group_by(column)).all():
        if value is not None:
            counts[value] = total
    return counts


def _get_user_or_404(db: Session, user_id: UUID) -> User:
    user = crud_user.get(db, user_id)
    if user is None:
        raise NotFoundException("User not found")
    return user


# ===== STATISTICS =====

def build_system_statistics(db: Session, *, now: Optional[datetime] = None) -> SystemStatisticsResponse:
    """Aggregate dashboard figures straight from the tables."""
    now = now or datetime.utcnow()
    month_start = datetime(now.year, now.month, 1)

    def count(model, *conditions) -> int:
        return db.scalar(select(func.count(model.id)).where(*conditions)) or 0

    # Monthly trend: disposals created per calendar month, oldest first
    first_year, first_month = _shift_month(now.year, now.month, -(TREND_MONTHS - 1))
    trend_start = datetime(first_year, first_month, 1)
    year_col = extract("year", Disposal.created_at)
    month_col = extract("month", Disposal.created_at)
    trend_rows = db.execute(
        select(year_col, month_col, func.count(Disposal.id))
        .where(Disposal.created_at >= trend_start)
        .group_by(year_col, month_col)
    ).all()
    by_month = {(int(y), int(m)): total for y, m, total in trend_rows}
    monthly_trend: List[MonthlyTrendItem] = []
    for offset in range(TREND_MONTHS):
        year, month = _shift_month(first_year, first_month, offset)
        monthly_trend.append(
            MonthlyTrendItem(month=MONTH_NAMES[month - 1], year=year, count=by_month.get((year, month), 0))
        )

    medicine_count = func.count(Disposal.id)
    top_rows = db.execute(
        select(Disposal.generic_name, medicine_count)
        .group_by(Disposal.generic_name)
        .order_by(medicine_count.desc(), Disposal.generic_name.asc())
        .limit(TOP_MEDICINES_LIMIT)
    ).all()

    return SystemStatisticsResponse(
        total_users=count(User, User.role == "user", User.is_active.is_(True)),
        total_chws=count(User, User.role == "chw", User.is_active.is_(True)),
        users_by_role=_grouped_counts(db, User.role, sorted(ALLOWED_ROLES)),
        pending_approvals=count(User, User.is_approved.is_(False), User.is_active.is_(True)),
        total_disposals=count(Disposal),
        completed_this_month=count(
            Disposal, Disposal.status == "completed", Disposal.completed_at >= month_start
        ),
        high_risk_collected=count(Disposal, Disposal.status == "completed", Disposal.risk_level == "HIGH"),
        risk_distribution=_grouped_counts(db, Disposal.risk_level, RISK_LEVELS),
        disposal_status_distribution=_grouped_counts(db, Disposal.status, sorted(DISPOSAL_STATUSES)),
        pending_pickups=count(PickupRequest, PickupRequest.status == "pending"),
        pickup_status_distribution=_grouped_counts(db, PickupRequest.status, sorted(PICKUP_STATUSES)),
        monthly_trend=monthly_trend,
        top_medicines=[TopMedicineItem(name=name, count=total) for name, total in top_rows],
    )


@router.get(
    "/stats",
    response_model=ApiResponse[SystemStatisticsResponse],
    summary="Get system statistics",
)
async def get_system_stats(db: Session = Depends(get_db)) -> dict:
    return {"success": True, "data": build_system_statistics(db)}


# ===== USER MANAGEMENT =====

@router.get(
    "/users",
    response_model=ApiResponse[List[UserResponse]],
    summary="List users",
)
async def list_users(
    role: Optional[str] = Query(default=None),
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict:
    users, total = crud_user.list_users(db, role=role, search=search, page=page, limit=limit)
    return {
        "success": True,
        "data": [UserResponse.model_validate(u) for u in users],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/users/pending",
    response_model=ApiResponse[List[UserResponse]],
    summary="List accounts waiting for approval",
)
async def list_pending_users(db: Session = Depends(get_db)) -> dict:
    users = crud_user.list_pending(db)
    return {"success": True, "data": [UserResponse.model_validate(u) for u in users]}


@router.put(
    "/users/{user_id}",
    response_model=ApiResponse[UserResponse],
    summary="Update a user",
)
async def update_user(
    user_id: UUID,
    user_in: AdminUserUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id and user_in.is_active is False:
        raise SelfModificationException("deactivate")

    update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in update_data:
        update_data["email"] = update_data["email"].strip().lower()
        existing = crud_user.get_by_email(db, update_data["email"])
        if existing is not None and existing.id != user.id:
            raise ConflictException("User already exists with this email")
    if "email" in update_data or "role" in update_data:
        check_email_domain(update_data.get("email", user.email), update_data.get("role", user.role))

    user = crud_user.update(db, db_obj=user, obj_in=update_data)
    logger.info(f"[ADMIN] User {user.id} updated by {current_user.id}")
    return {"success": True, "message": "User updated successfully", "data": UserResponse.model_validate(user)}


@router.delete(
    "/users/{user_id}",
    response_model=ApiResponse[None],
    summary="Delete a user",
)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise SelfModificationException("delete")

    crud_user.hard_delete(db, user=user)
    logger.info(f"[ADMIN] User {user_id} deleted by {current_user.id}")
    return {"success": True, "message": "User deleted successfully"}


@router.put(
    "/users/{user_id}/approve",
    response_model=ApiResponse[UserResponse],
    summary="Approve a pending account",
)
async def approve_user(
    user_id: UUID,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.is_approved:
        raise ConflictException("User is already approved")

    user = crud_user.approve(db, user=user, approved_by=current_user.id)
    logger.info(f"[ADMIN] User {user.id} approved by {current_user.id}")

    background_tasks.add_task(account_notification_service.notify_approved, name=user.name, email=user.email)
    return {
        "success": True,
        "message": "User approved successfully. Approval email sent.",
        "data": UserResponse.model_validate(user),
    }


@router.put(
    "/users/{user_id}/reject",
    response_model=ApiResponse[None],
    summary="Reject a registration",
)
async def reject_user(
    user_id: UUID,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise SelfModificationException("reject")

    crud_user.set_active(db, user=user, is_active=False)
    logger.info(f"[ADMIN] Registration {user_id} rejected by {current_user.id}")
    return {"success": True, "message": "User registration rejected"}


@router.put(
    "/users/{user_id}/activate",
    response_model=ApiResponse[UserResponse],
    summary="Activate an account",
)
async def activate_user(user_id: UUID, db: Session = Depends(get_db)) -> dict:
    user = _get_user_or_404(db, user_id)
    user = crud_user.set_active(db, user=user, is_active=True)
    return {
        "success": True,
        "message": "User account activated successfully",
        "data": UserResponse.model_validate(user),
    }


@router.put(
    "/users/{user_id}/deactivate",
    response_model=ApiResponse[UserResponse],
    summary="Deactivate an account",
)
async def deactivate_user(
    user_id: UUID,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    user = _get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise SelfModificationException("deactivate")

    user = crud_user.set_active(db, user=user, is_active=False)
    return {
        "success": True,
        "message": "User account deactivated successfully",
        "data": UserResponse.model_validate(user),
    }


# ===== GLOBAL LISTINGS =====

@router.get(
    "/disposals",
    response_model=ApiResponse[List[AdminDisposalResponse]],
    summary="List all disposals",
)
async def list_all_disposals(
    status: Optional[str] = Query(default=None),
    risk_level: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict:
    disposals, total = crud_disposal.list_all(db, status=status, risk_level=risk_level, page=page, limit=limit)
    return {
        "success": True,
        "data": [AdminDisposalResponse.model_validate(d) for d in disposals],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/pickups",
    response_model=ApiResponse[List[PickupRequestResponse]],
    summary="List all pickup requests",
)
async def list_all_pickups(
    status: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict:
    pickups, total = crud_pickup_request.list_all(db, status=status, page=page, limit=limit)
    return {
        "success": True,
        "data": [PickupRequestResponse.model_validate(p) for p in pickups],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }
