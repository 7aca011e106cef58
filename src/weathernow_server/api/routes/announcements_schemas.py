"""
Pydantic Request/Response Schemas for the Announcement API
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

AnnouncementType = Literal["info", "warning", "emergency"]
DisplayMode = Literal["banner", "popup"]


class AnnounceRequest(BaseModel):
    """Admin payload for a new announcement."""
    text: str = Field(default="", max_length=5000)
    title: str = Field(default="", max_length=255)
    type: AnnouncementType = "info"
    display: DisplayMode = "banner"
    duration: int = Field(default=0, ge=0, description="Seconds; 0 = until dismissed")
    tts: bool = False
    password: str | None = Field(None, description="Alternative to the x-admin-password header")

    @field_validator("text", "title", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


class AnnouncementResponse(BaseModel):
    """A stored announcement as sent to kiosks."""
    id: int
    text: str
    title: str
    type: AnnouncementType
    display: DisplayMode
    duration: int
    tts: bool
    created: int


class OkResponse(BaseModel):
    ok: bool = True


class HealthResponse(BaseModel):
    ok: bool = True
    uptime: float
