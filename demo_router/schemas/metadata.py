"""Pydantic schema for project metadata records."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectMetadata(BaseModel):
    """Metadata describing one deployed project.

    Records are written by the deployment process and read-only to the router.
    They are validated when read from the metadata store.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = Field(..., min_length=1, description="Unique project identifier.")
    description: str | None = Field(
        default=None, description="Short human-readable description."
    )
    updated: datetime = Field(..., description="Timestamp of the last deployment.")
    github: str | None = Field(default=None, description="Source repository URL.")
    featured: bool = Field(
        default=False, description="Featured projects are listed first."
    )

    @field_validator("updated")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are treated as UTC so records stay comparable.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
