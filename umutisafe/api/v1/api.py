"""API router aggregator."""

from fastapi import APIRouter

from umutisafe.api.v1.endpoints import admin, auth, chws, disposals, education, medicines, pickups

api_router = APIRouter(prefix="/api")

api_router.include_router(auth.router)
api_router.include_router(medicines.router)
api_router.include_router(disposals.router)
api_router.include_router(pickups.router)
api_router.include_router(chws.router)
api_router.include_router(education.router)
api_router.include_router(admin.router)

__all__ = ["api_router"]
