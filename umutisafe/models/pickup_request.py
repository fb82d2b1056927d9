import uuid

from sqlalchemy import Column, Boolean, ForeignKey, Numeric, String, Text, TIMESTAMP, CheckConstraint, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PickupRequest(Base):
    __tablename__ = "pickup_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Parties
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    chw_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), index=True)

    # Request Details
    medicine_name = Column(String(255), nullable=False)
    disposal_guidance = Column(Text)
    reason = Column(String(100), nullable=False)
    pickup_location = Column(String(255), nullable=False)
    latitude = Column(Numeric(10, 8, asdecimal=False))
    longitude = Column(Numeric(11, 8, asdecimal=False))
    preferred_time = Column(TIMESTAMP, nullable=False, index=True)

    # Status
    status = Column(String(20), nullable=False, default="pending", index=True)
    consent_given = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    chw_notes = Column(Text)
    scheduled_time = Column(TIMESTAMP)
    completed_at = Column(TIMESTAMP)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'scheduled', 'collected', 'completed', 'cancelled', 'rejected')",
            name="check_pickup_status",
        ),
    )

    # Relationships
    requester = relationship("User", foreign_keys=[user_id], back_populates="pickup_requests")
    chw = relationship("User", foreign_keys=[chw_id], back_populates="assigned_pickups")
    disposal = relationship("Disposal", back_populates="pickup_request", uselist=False)
