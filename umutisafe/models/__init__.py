"""
SQLAlchemy Models for UmutiSafe
"""

from ..database import Base
from .user import User
from .medicine import Medicine
from .pickup_request import PickupRequest
from .disposal import Disposal
from .medicine_image import MedicineImage
from .education_tip import EducationTip

# Export all models
__all__ = [
    "Base",
    "User",
    "Medicine",
    "PickupRequest",
    "Disposal",
    "MedicineImage",
    "EducationTip",
]
