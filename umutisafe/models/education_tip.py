import uuid

from sqlalchemy import Column, Boolean, Integer, String, Text, TIMESTAMP, Uuid
from sqlalchemy.sql import func
from ..database import Base


class EducationTip(Base):
    __tablename__ = "education_tips"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    title = Column(String(255), nullable=False)
    icon = Column(String(100))
    summary = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(100), index=True)

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    display_order = Column(Integer, default=0, index=True)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
