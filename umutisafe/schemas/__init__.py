from .common import (
	ApiResponse,
	ErrorResponse,
	Pagination,
)
from .user import (
	UserCreate,
	UserLogin,
	ProfileUpdate,
	PasswordChange,
	AvailabilityUpdate,
	AdminUserUpdate,
	UserSummary,
	UserResponse,
	LoginUserResponse,
	AuthPayload,
	LoginPayload,
)
from .medicine import (
	MedicineCreate,
	MedicineUpdate,
	MedicineResponse,
	MedicineImportResult,
	PredictTextRequest,
	PredictionResponse,
)
from .pickup_request import (
	PickupRequestCreate,
	PickupStatusUpdate,
	PickupRequestResponse,
	PickupSummary,
	DisposalSummary,
	ChwPickupStats,
)
from .disposal import (
	DisposalCreate,
	DisposalUpdate,
	DisposalResponse,
	AdminDisposalResponse,
	MedicineImageResponse,
	DisposalStats,
)
from .education_tip import (
	EducationTipCreate,
	EducationTipUpdate,
	EducationTipResponse,
)
from .statistics import (
	MonthlyTrendItem,
	TopMedicineItem,
	SystemStatisticsResponse,
)

__all__ = [
	"ApiResponse",
	"ErrorResponse",
	"Pagination",
	"UserCreate",
	"UserLogin",
	"ProfileUpdate",
	"PasswordChange",
	"AvailabilityUpdate",
	"AdminUserUpdate",
	"UserSummary",
	"UserResponse",
	"LoginUserResponse",
	"AuthPayload",
	"LoginPayload",
	"MedicineCreate",
	"MedicineUpdate",
	"MedicineResponse",
	"MedicineImportResult",
	"PredictTextRequest",
	"PredictionResponse",
	"PickupRequestCreate",
	"PickupStatusUpdate",
	"PickupRequestResponse",
	"PickupSummary",
	"DisposalSummary",
	"ChwPickupStats",
	"DisposalCreate",
	"DisposalUpdate",
	"DisposalResponse",
	"AdminDisposalResponse",
	"MedicineImageResponse",
	"DisposalStats",
	"EducationTipCreate",
	"EducationTipUpdate",
	"EducationTipResponse",
	"MonthlyTrendItem",
	"TopMedicineItem",
	"SystemStatisticsResponse",
]
