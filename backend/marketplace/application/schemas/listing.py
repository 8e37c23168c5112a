"""Pydantic DTOs (Data Transfer Objects) for the Listing feature."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from marketplace.domain.entities import ListingStatus


class ListingCreate(BaseModel):
    """Schema for creating a new listing."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Calculus Textbook"])
    description: str = Field(default="", examples=["Barely used, 8th edition"])
    price: float = Field(..., ge=0, examples=[35.0])
    currency: str = Field(default="USD", min_length=3, max_length=3)
    category: str = Field(default="other", min_length=1, max_length=100, examples=["books"])
    campus: str | None = None
    owner_id: str | None = None
    status: Literal["draft", "active"] = "active"


class ListingUpdate(BaseModel):
    """Schema for updating an existing listing — all fields optional."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: float | None = Field(None, ge=0)
    category: str | None = Field(None, min_length=1, max_length=100)
    campus: str | None = None
    status: Literal["draft", "active"] | None = None


class ListingResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    title: str
    description: str
    price: float
    currency: str
    category: str
    campus: str | None = None
    owner_id: str | None = None
    status: ListingStatus
    embedding_handle: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
