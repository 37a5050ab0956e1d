"""Pydantic schemas for venue data."""

from pydantic import BaseModel, ConfigDict


class VenueResponse(BaseModel):
    """Venue response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    family: str
    source: str
    address: str | None = None
    location: str | None = None
    website: str | None = None
