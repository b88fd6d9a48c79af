from typing import List

from app.features.auth.services.preference_service import PreferenceService
from app.features.dashboard.services.dashboard_manager import DashboardManager

DASHBOARD_APP_ID = "dashboard"
LAYOUT_KEY = "layout"


def parse_layout(layout: str) -> List[str]:
    """
    Split a stored comma-separated layout into panel ids.

    Ids are normalized on read: surrounding whitespace is stripped and empty
    entries are dropped, so "mail, calendar," reads back as ["mail", "calendar"].
    The stored string itself is kept verbatim.
    """
    return [panel_id.strip() for panel_id in layout.split(",") if panel_id.strip()]


class DashboardService:
    def __init__(self, preferences: PreferenceService, manager: DashboardManager, default_layout: str):
        self.preferences = preferences
        self.manager = manager
        self.default_layout = default_layout

    async def get_dashboard_state(self, user_id: str) -> dict:
        """Registered panels plus the user's saved panel order."""
        self.manager.load_panels()

        layout = await self.preferences.get_user_value(
            user_id, DASHBOARD_APP_ID, LAYOUT_KEY, self.default_layout
        )

        return {
            "panels": [panel.to_state() for panel in self.manager.get_panels()],
            "layout": parse_layout(layout),
        }

    async def set_layout(self, user_id: str, layout: str) -> dict:
        await self.preferences.set_user_value(user_id, DASHBOARD_APP_ID, LAYOUT_KEY, layout)
        return {"layout": layout}
