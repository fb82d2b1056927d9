import uuid

from sqlalchemy import Column, String, Text, Boolean, TIMESTAMP, CheckConstraint, Uuid
from sqlalchemy.sql import func
from ..database import Base


class Medicine(Base):
    __tablename__ = "registered_medicines"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Identification
    generic_name = Column(String(255), nullable=False, index=True)
    brand_name = Column(Text, index=True)
    registration_number = Column(String(255), index=True)

    # Product details
    dosage_form = Column(Text, nullable=False)
    strength = Column(Text)
    pack_size = Column(Text)
    packaging_type = Column(Text)
    shelf_life = Column(Text)

    # Classification
    category = Column(Text, nullable=False, index=True)
    risk_level = Column(String(10), nullable=False, default="LOW", index=True)

    # Manufacturer
    manufacturer = Column(Text)
    manufacturer_address = Column(Text)
    manufacturer_country = Column(String(255))
    marketing_authorization_holder = Column(Text)
    local_technical_representative = Column(Text)

    # Regulatory
    fda_approved = Column(Boolean, default=True)
    disposal_instructions = Column(Text)
    registration_date = Column(TIMESTAMP)
    expiry_date = Column(TIMESTAMP)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("risk_level IN ('LOW', 'MEDIUM', 'HIGH')", name="check_medicine_risk_level"),
    )
