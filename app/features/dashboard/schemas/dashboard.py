from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Panel(BaseModel):
    """A dashboard widget contributed by an app."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    icon_class: str = Field(..., alias="iconClass")
    url: str

    def to_state(self) -> dict:
        return self.model_dump(by_alias=True)


class DashboardState(BaseModel):
    panels: List[dict]
    layout: List[str]


class UpdateLayoutRequest(BaseModel):
    layout: str = Field(..., description="Comma-separated panel ids, in display order")


class LayoutResponse(BaseModel):
    layout: str
