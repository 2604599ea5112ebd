"""Pydantic schemas for the FastAPI server.

JSON field names are camelCase (``durationMinutes``, ``seriesId``...) to
match the web client; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.entries import Category, Series, SeriesStatus, WorkItem


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CredentialsRequest(BaseModel):
    """Request body for register/login."""

    username: str = Field(..., description="Unique username")
    password: str = Field(..., description="Plain text password")


class AuthResponse(BaseModel):
    """Token issued on register/login."""

    token: str
    username: str


class MeResponse(BaseModel):
    """Identity bound to the current token."""

    id: int
    username: str


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str


class DeleteResponse(BaseModel):
    """Deletes are idempotent; ``deleted`` tells whether a record existed."""

    deleted: bool


class WorkItemRequest(CamelModel):
    """Request body for upserting a work item (keyed by client id)."""

    id: str = Field(..., min_length=1, description="Client generated id")
    title: Optional[str] = Field(default=None)
    content: str = Field(default="")
    category: Category
    date: datetime
    duration_minutes: int = Field(default=0, ge=0)
    series_id: Optional[str] = Field(default=None, description="Loose link to a series")

    def to_domain(self) -> WorkItem:
        return WorkItem(
            id=self.id,
            title=self.title or None,
            content=self.content,
            category=self.category,
            date=self.date,
            duration_minutes=self.duration_minutes,
            series_id=self.series_id or None,
        )


class WorkItemResponse(CamelModel):
    """Serialized work item."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    title: Optional[str] = None
    content: str
    category: Category
    date: str
    duration_minutes: int
    series_id: Optional[str] = None

    @classmethod
    def from_domain(cls, item: WorkItem) -> "WorkItemResponse":
        return cls(
            id=item.id,
            title=item.title,
            content=item.content,
            category=item.category,
            date=item.date,
            duration_minutes=item.duration_minutes,
            series_id=item.series_id,
        )


class SeriesRequest(CamelModel):
    """Request body for upserting a series."""

    id: str = Field(..., min_length=1, description="Client generated id")
    title: str = Field(..., min_length=1)
    description: str = Field(default="")
    status: SeriesStatus = Field(default=SeriesStatus.ACTIVE)
    created_at: datetime
    completed_at: Optional[datetime] = None

    def to_domain(self) -> Series:
        return Series(
            id=self.id,
            title=self.title,
            description=self.description,
            status=self.status,
            created_at=self.created_at,
            completed_at=self.completed_at,
        )


class SeriesResponse(CamelModel):
    """Serialized series."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    title: str
    description: str
    status: SeriesStatus
    created_at: str
    completed_at: Optional[str] = None

    @classmethod
    def from_domain(cls, series: Series) -> "SeriesResponse":
        return cls(
            id=series.id,
            title=series.title,
            description=series.description,
            status=series.status,
            created_at=series.created_at,
            completed_at=series.completed_at,
        )


class GenerateRequest(BaseModel):
    """Request body for the generation proxy."""

    model: Optional[str] = Field(default=None, description="Model name (server default if omitted)")
    prompt: Optional[str] = Field(default=None, description="Prompt text")


class GenerateResponse(BaseModel):
    """Raw generated text."""

    text: str


class CategoryBucket(BaseModel):
    name: str
    label: str
    value: int


class WeekdayBucket(BaseModel):
    day: int
    name: str
    minutes: int


class StatsResponse(CamelModel):
    """Dashboard statistics over the caller's items."""

    total_minutes: int
    category_distribution: List[CategoryBucket]
    daily_distribution: List[WeekdayBucket]
    activity: Dict[str, int]
