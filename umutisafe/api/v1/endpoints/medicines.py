"""Medicine registry endpoints: lookup, text prediction and admin maintenance."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from umutisafe.api.deps import get_db, require_role
from umutisafe.config import settings
from umutisafe.core.exceptions import BadRequestException, NotFoundException
from umutisafe.crud import crud_medicine
from umutisafe.models.user import User
from umutisafe.schemas.common import ApiResponse, Pagination
from umutisafe.schemas.medicine import (
    IMPORT_MODES,
    MedicineCreate,
    MedicineImportResult,
    MedicineResponse,
    MedicineUpdate,
    PredictedMedicineInfo,
    PredictionResponse,
    PredictTextRequest,
)
from umutisafe.services.medicine_import import parse_medicine_csv
from umutisafe.utils.file_handler import read_csv_upload

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/medicines",
    tags=["Medicines"],
)

DISPOSAL_GUIDANCE = {
    "LOW": (
        "Mix with coffee grounds or kitty litter, seal in plastic bag, and dispose in regular trash. "
        "Remove personal information from labels."
    ),
    "MEDIUM": (
        "Return to pharmacy or request CHW pickup. Do not dispose in household trash or flush down toilet. "
        "This medicine requires proper disposal to prevent environmental contamination."
    ),
    "HIGH": (
        "MUST be returned to CHW or authorized collection site immediately. NEVER dispose in household trash. "
        "This is a controlled substance with high risk for misuse and environmental harm."
    ),
}

SAFETY_NOTES = {
    "LOW": "Low environmental impact. Standard household disposal acceptable with precautions.",
    "MEDIUM": "Moderate risk. Professional disposal recommended to prevent water contamination and antibiotic resistance.",
    "HIGH": "CRITICAL: High risk for misuse, overdose, and severe environmental damage. Mandatory professional disposal.",
}

KNOWN_CONFIDENCE = 0.9
UNKNOWN_CONFIDENCE = 0.7


@router.get(
    "",
    response_model=ApiResponse[List[MedicineResponse]],
    summary="List registered medicines",
)
async def list_medicines(
    search: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    risk_level: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> dict:
    medicines, total = crud_medicine.list_medicines(
        db,
        search=search,
        category=category,
        risk_level=risk_level.upper() if risk_level else None,
        page=page,
        limit=limit,
    )
    return {
        "success": True,
        "data": [MedicineResponse.model_validate(m) for m in medicines],
        "pagination": Pagination.build(total=total, page=page, limit=limit),
    }


@router.get(
    "/search",
    response_model=ApiResponse[List[MedicineResponse]],
    summary="Autocomplete search",
)
async def search_medicines(
    q: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
) -> dict:
    medicines = crud_medicine.search(db, q=q)
    return {"success": True, "data": [MedicineResponse.model_validate(m) for m in medicines]}


@router.post(
    "/predict/text",
    response_model=ApiResponse[PredictionResponse],
    summary="Classify a medicine from its name",
)
async def predict_from_text(
    request_in: PredictTextRequest,
    db: Session = Depends(get_db),
) -> dict:
    """
    Look the generic name up in the registry (case-insensitive).

    Unknown medicines are treated as MEDIUM risk with a lower confidence.
    """
    medicine = crud_medicine.find_by_generic_name(db, request_in.generic_name)
    risk_level = medicine.risk_level if medicine else "MEDIUM"

    prediction = PredictionResponse(
        predicted_category=medicine.category if medicine else "Unknown",
        risk_level=risk_level,
        confidence=KNOWN_CONFIDENCE if medicine else UNKNOWN_CONFIDENCE,
        disposal_guidance=(medicine.disposal_instructions if medicine else None) or DISPOSAL_GUIDANCE[risk_level],
        safety_notes=SAFETY_NOTES[risk_level],
        requires_chw=risk_level == "HIGH",
        medicine_info=PredictedMedicineInfo(
            generic_name=request_in.generic_name,
            brand_name=request_in.brand_name or "N/A",
            dosage_form=request_in.dosage_form or "N/A",
        ),
    )
    return {"success": True, "data": prediction}


@router.post(
    "/upload-csv",
    response_model=ApiResponse[MedicineImportResult],
    summary="Bulk import the registry from CSV",
)
async def upload_medicines_csv(
    file: UploadFile = File(..., description="Registry export in CSV format"),
    mode: str = Query(default="replace", description="'replace' clears the registry first, 'append' only upserts"),
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    mode = mode.strip().lower()
    if mode not in IMPORT_MODES:
        raise BadRequestException(f"Mode must be one of {sorted(IMPORT_MODES)}")

    text = read_csv_upload(file, max_size_bytes=settings.MAX_CSV_FILE_SIZE)
    rows = parse_medicine_csv(text)
    counts = crud_medicine.import_rows(db, rows=rows, mode=mode)
    logger.info(f"[MEDICINE] Registry import by {current_user.id}: {counts}")
    return {
        "success": True,
        "message": "Medicines imported successfully",
        "data": MedicineImportResult(mode=mode, **counts),
    }


@router.get(
    "/{medicine_id}",
    response_model=ApiResponse[MedicineResponse],
    summary="Get a medicine",
)
async def get_medicine(medicine_id: UUID, db: Session = Depends(get_db)) -> dict:
    medicine = crud_medicine.get_active(db, medicine_id)
    if medicine is None:
        raise NotFoundException("Medicine not found")
    return {"success": True, "data": MedicineResponse.model_validate(medicine)}


@router.post(
    "",
    response_model=ApiResponse[MedicineResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add a medicine (admin)",
)
async def create_medicine(
    medicine_in: MedicineCreate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    medicine = crud_medicine.create(db, obj_in=medicine_in.model_dump())
    return {
        "success": True,
        "message": "Medicine created successfully",
        "data": MedicineResponse.model_validate(medicine),
    }


@router.put(
    "/{medicine_id}",
    response_model=ApiResponse[MedicineResponse],
    summary="Update a medicine (admin)",
)
async def update_medicine(
    medicine_id: UUID,
    medicine_in: MedicineUpdate,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    medicine = crud_medicine.get(db, medicine_id)
    if medicine is None:
        raise NotFoundException("Medicine not found")
    medicine = crud_medicine.update(db, db_obj=medicine, obj_in=medicine_in.model_dump(exclude_unset=True, exclude_none=True))
    return {
        "success": True,
        "message": "Medicine updated successfully",
        "data": MedicineResponse.model_validate(medicine),
    }


@router.delete(
    "/{medicine_id}",
    response_model=ApiResponse[None],
    summary="Retire a medicine (admin)",
)
async def delete_medicine(
    medicine_id: UUID,
    current_user: User = Depends(require_role("admin")),
    db: Session = Depends(get_db),
) -> dict:
    if crud_medicine.delete(db, id=medicine_id) is None:
        raise NotFoundException("Medicine not found")
    return {"success": True, "message": "Medicine deleted successfully"}
