from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ResultPayload(BaseModel):
    """Notification record handed to the host's completion callback."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(..., description="Notification title")
    content: str = Field(..., description="Notification body, newline separated")
    icon: str = Field(..., description="SF Symbol name shown next to the title")
    icon_color: str = Field(..., alias="icon-color", pattern=r"^#[0-9A-Fa-f]{6}$")

    def to_host(self) -> dict:
        return self.model_dump(by_alias=True)


class QueryResponse(BaseModel):
    kind: str
    region: str
    url: str
    payload: dict = Field(default_factory=dict, description="Host payload, keyed as delivered")
