"""CRUD package exports."""

from .base import CRUDBase
from .user import crud_user
from .medicine import crud_medicine
from .disposal import crud_disposal
from .pickup_request import crud_pickup_request
from .education_tip import crud_education_tip

__all__ = [
    "CRUDBase",
    "crud_user",
    "crud_medicine",
    "crud_disposal",
    "crud_pickup_request",
    "crud_education_tip",
]
