from typing import Callable, Dict, List

from app.features.dashboard.schemas.dashboard import Panel
from app.platform.logger import get_logger

logger = get_logger("dashboard_manager")

PanelListener = Callable[["DashboardManager"], None]


class DashboardManager:
    """
    Registry of dashboard panels.

    Apps subscribe a listener; every `load_panels()` dispatches the
    register-panels event to all listeners, which call `register_panel`.
    Registering an id again replaces the earlier panel in place.
    """

    def __init__(self):
        self._panels: Dict[str, Panel] = {}
        self._listeners: List[PanelListener] = []

    def add_listener(self, listener: PanelListener) -> None:
        self._listeners.append(listener)

    def register_panel(self, panel: Panel) -> None:
        self._panels[panel.id] = panel

    def load_panels(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Panel listener {listener!r} failed: {e}")

    def get_panels(self) -> List[Panel]:
        return list(self._panels.values())


def register_default_panels(manager: DashboardManager) -> None:
    manager.register_panel(
        Panel(id="calendar", title="Upcoming events", icon_class="icon-calendar-dark", url="/apps/calendar/")
    )
    manager.register_panel(
        Panel(id="recommendations", title="Recommended files", icon_class="icon-files-dark", url="/apps/files/")
    )
    manager.register_panel(
        Panel(id="spreed", title="Talk mentions", icon_class="icon-talk", url="/apps/spreed/")
    )
    manager.register_panel(
        Panel(id="mail", title="Important mail", icon_class="icon-mail", url="/apps/mail/")
    )


dashboard_manager = DashboardManager()
dashboard_manager.add_listener(register_default_panels)


def get_dashboard_manager() -> DashboardManager:
    return dashboard_manager
