"""Model describing the globally active capture window."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Moment(BaseModel):
    """Moment returned by the moment-lookup endpoint for a region."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    region: str
    start_date: str = Field(..., alias="startDate")
    # Usually two minutes after ``start_date``.
    end_date: str = Field(..., alias="endDate")
    timezone: Optional[str] = None
    local_time: Optional[str] = Field(None, alias="localTime")
    local_date: Optional[str] = Field(None, alias="localDate")


__all__ = ["Moment"]
