import os

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.dependencies.auth import get_current_user
from app.features.auth.models.user import User
from app.features.auth.services.preference_service import PreferenceService
from app.features.dashboard.schemas.dashboard import (
    DashboardState,
    LayoutResponse,
    UpdateLayoutRequest,
)
from app.features.dashboard.services.dashboard import DashboardService
from app.features.dashboard.services.dashboard_manager import DashboardManager, get_dashboard_manager
from app.platform.config import settings
from app.platform.db.session import get_db
from app.platform.response import api_response

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../template")

env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(
    db: AsyncSession = Depends(get_db),
    manager: DashboardManager = Depends(get_dashboard_manager),
) -> DashboardService:
    return DashboardService(
        PreferenceService(db), manager, default_layout=settings.DASHBOARD_DEFAULT_LAYOUT
    )


@router.get(
    "",
    response_class=HTMLResponse,
    summary="Dashboard page",
    description="Bootstrap page with the panels and layout embedded as initial state",
)
async def dashboard_index(
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    state = await service.get_dashboard_state(current_user.id)
    template = env.get_template("index.html")
    return HTMLResponse(
        template.render(app_name=settings.APP_NAME, panels=state["panels"], layout=state["layout"])
    )


@router.get(
    "/state",
    response_model=dict,
    summary="Get dashboard state",
    description="Registered panels and the current user's panel order",
)
async def get_dashboard_state(
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    state = await service.get_dashboard_state(current_user.id)

    return api_response(
        message="Dashboard state retrieved successfully",
        data=DashboardState(**state).model_dump(),
    )


@router.post(
    "/layout",
    response_model=dict,
    summary="Update dashboard layout",
    description="Persist the comma-separated panel order of the current user",
)
async def update_layout(
    payload: UpdateLayoutRequest,
    current_user: User = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
):
    result = await service.set_layout(current_user.id, payload.layout)

    return api_response(
        message="Dashboard layout updated successfully",
        data=LayoutResponse(**result).model_dump(),
    )
