import uuid

from sqlalchemy import Column, ForeignKey, Numeric, String, Text, TIMESTAMP, CheckConstraint, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Disposal(Base):
    __tablename__ = "disposals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Medicine info
    generic_name = Column(String(255), nullable=False)
    brand_name = Column(String(255))
    dosage_form = Column(String(255))
    packaging_type = Column(String(255))
    medicine_name = Column(String(255))

    # Prediction
    predicted_category = Column(String(255))
    predicted_category_confidence = Column(Numeric(5, 4, asdecimal=False))
    risk_level = Column(String(10), index=True)
    confidence = Column(Numeric(5, 4, asdecimal=False))

    # Lifecycle
    status = Column(String(30), nullable=False, default="pending_review", index=True)
    reason = Column(String(255))
    disposal_guidance = Column(Text)
    handling_method = Column(Text)
    image_url = Column(String(500))
    pickup_request_id = Column(Uuid, ForeignKey("pickup_requests.id", ondelete="SET NULL"))
    completed_at = Column(TIMESTAMP)
    notes = Column(Text)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending_review', 'pickup_requested', 'completed', 'cancelled')",
            name="check_disposal_status",
        ),
        CheckConstraint(
            "risk_level IS NULL OR risk_level IN ('LOW', 'MEDIUM', 'HIGH')",
            name="check_disposal_risk_level",
        ),
    )

    # Relationships
    user = relationship("User", back_populates="disposals")
    pickup_request = relationship("PickupRequest", back_populates="disposal")
    images = relationship(
        "MedicineImage",
        back_populates="disposal",
        cascade="all, delete-orphan",
    )
