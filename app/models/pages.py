"""Models for the rendering-strategy pages."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


class RenderStrategy(StrEnum):
    """Page rendering strategies demonstrated by the playground."""

    SSG = "ssg"
    SSR = "ssr"
    ISR = "isr"
    EDGE = "edge"


class DataCard(BaseModel):
    """Formatted weather reading as shown on a strategy page."""

    title: str
    render_type: str
    strategy: RenderStrategy
    description: str
    location: str
    temperature: str
    wind_speed: str
    rendered_at: datetime
    available: bool
    unavailable_reason: str | None = None


class PageLink(BaseModel):
    """Entry in the index of strategy pages."""

    name: str
    path: str
    description: str


class PageIndex(BaseModel):
    """Response model for the index endpoint."""

    title: str
    pages: list[PageLink]
