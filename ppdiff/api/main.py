from fastapi import APIRouter

from .endpoints.health import router as health_router
from .endpoints.profile import router as profile_router

api_router = APIRouter()


@api_router.get("/")
async def root():
    return {"message": "ppdiff API is running"}


api_router.include_router(health_router)
api_router.include_router(profile_router)
