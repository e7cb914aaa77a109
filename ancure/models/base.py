"""Shared Pydantic base models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AncureBase(BaseModel):
    """Base model with shared config for all Ancure schemas."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ErrorDetail(BaseModel):
    detail: str


class Timestamped(BaseModel):
    generated_at: datetime = Field(default_factory=utc_now)
