"""Pydantic schemas for search and embedding API requests and responses."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


# ── Request Schemas ──────────────────────────────────────────────────


class _QueryRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=1000, description="Free-text product query")
    limit: int | None = Field(default=None, ge=1, le=50, description="Maximum number of results")

    @field_validator("query")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("query must not be blank")
        return value


class ProductSearchRequest(_QueryRequest):
    """Request body for structured semantic product search."""


class RagSearchRequest(_QueryRequest):
    """Request body for RAG search with snippets and aggregated context."""

    score_threshold: float | None = Field(default=None, ge=0.0, le=1.0)


class AssistantSearchRequest(_QueryRequest):
    """Request body for search results rendered as assistant-ready text."""

    mode: Literal["products", "rag"] = "products"


class BackfillRequest(BaseModel):
    limit: int | None = Field(default=None, ge=1, le=10000)


# ── Response Schemas ─────────────────────────────────────────────────


class ProductSearchResultSchema(BaseModel):
    listing_id: str
    title: str
    description: str
    price: float
    category: str
    score: float

    model_config = {"from_attributes": True}


class ProductSearchResponseSchema(BaseModel):
    results: list[ProductSearchResultSchema] = []


class RagSearchResultSchema(ProductSearchResultSchema):
    snippet: str = ""


class RagSearchResponseSchema(BaseModel):
    results: list[RagSearchResultSchema] = []
    text: str = ""


class AssistantSearchResponseSchema(BaseModel):
    content: str
    result_count: int = 0


class BackfillResponseSchema(BaseModel):
    processed: int
    errors: int
