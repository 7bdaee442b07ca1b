from fastapi import APIRouter

from spend_wastage.api.routes import health, spend_wastage

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(spend_wastage.router, prefix="/spend-wastage", tags=["spend-wastage"])
