from __future__ import annotations

from pydantic import Field

from ..catalog.models import CamelModel, Language


class SurpriseRequest(CamelModel):
    spice_level: int = Field(default=0, ge=0, le=5)
    flavors: list[str] = Field(default_factory=list)
    language: Language = "en"


class ChatRequest(SurpriseRequest):
    message: str = Field(..., min_length=1, max_length=1000)
    spice_level: int = Field(..., ge=0, le=5)


class ChatResponse(CamelModel):
    message: str
    recommendations: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
