import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, TIMESTAMP, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class MedicineImage(Base):
    __tablename__ = "medicine_images"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    disposal_id = Column(Uuid, ForeignKey("disposals.id", ondelete="CASCADE"), nullable=False, index=True)

    filename = Column(String(255), nullable=False)
    url = Column(String(500), nullable=False)
    mimetype = Column(String(100))
    size = Column(Integer)

    created_at = Column(TIMESTAMP, server_default=func.now())

    disposal = relationship("Disposal", back_populates="images")
