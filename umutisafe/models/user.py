import uuid

from sqlalchemy import Column, Integer, Numeric, String, Boolean, TIMESTAMP, CheckConstraint, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    __tablename__ = "users"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication & Contact
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30))

    # Role & Authorization
    role = Column(String(20), nullable=False, default="user", index=True)

    # Profile
    avatar = Column(String(20))
    location = Column(String(255))
    sector = Column(String(255), index=True)

    # CHW fields
    availability = Column(String(20), default="available")
    completed_pickups = Column(Integer, default=0, nullable=False)
    rating = Column(Numeric(3, 2, asdecimal=False), default=0)
    coverage_area = Column(String(255))

    # Account Status
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_approved = Column(Boolean, default=False, nullable=False, index=True)
    approved_by = Column(Uuid)
    approved_at = Column(TIMESTAMP)
    last_login = Column(TIMESTAMP)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Constraints
    __table_args__ = (
        CheckConstraint("role IN ('user', 'chw', 'admin')", name="check_user_role"),
        CheckConstraint(
            "availability IS NULL OR availability IN ('available', 'busy', 'offline')",
            name="check_user_availability",
        ),
        CheckConstraint("rating >= 0 AND rating <= 5", name="check_user_rating"),
    )

    # Relationships
    disposals = relationship(
        "Disposal",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    pickup_requests = relationship(
        "PickupRequest",
        back_populates="requester",
        foreign_keys="PickupRequest.user_id",
        cascade="all, delete-orphan",
    )
    assigned_pickups = relationship(
        "PickupRequest",
        back_populates="chw",
        foreign_keys="PickupRequest.chw_id",
    )
