from fastapi import APIRouter

from app.features.accounts.routes.account import router as account_router
from app.features.dashboard.routes.dashboard import router as dashboard_router
from app.features.health.routes.health import router as health_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(dashboard_router)
api_router.include_router(account_router)
api_router.include_router(health_router)
