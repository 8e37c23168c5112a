"""Unit tests for search request validation."""

import pytest
from pydantic import ValidationError

from marketplace.application.schemas import (
    AssistantSearchRequest,
    BackfillRequest,
    ProductSearchRequest,
    RagSearchRequest,
)


class TestSearchRequests:

    def test_accepts_query_without_limit(self):
        request = ProductSearchRequest(query="desk lamp")
        assert request.limit is None

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_rejects_empty_or_blank_query(self, query):
        with pytest.raises(ValidationError):
            ProductSearchRequest(query=query)

    @pytest.mark.parametrize("limit", [0, 51])
    def test_rejects_out_of_range_limit(self, limit):
        with pytest.raises(ValidationError):
            ProductSearchRequest(query="lamp", limit=limit)

    def test_rag_threshold_bounds(self):
        assert RagSearchRequest(query="lamp", score_threshold=0.0).score_threshold == 0.0
        with pytest.raises(ValidationError):
            RagSearchRequest(query="lamp", score_threshold=1.5)

    def test_assistant_mode(self):
        assert AssistantSearchRequest(query="lamp").mode == "products"
        with pytest.raises(ValidationError):
            AssistantSearchRequest(query="lamp", mode="images")

    def test_backfill_limit_optional(self):
        assert BackfillRequest().limit is None
        with pytest.raises(ValidationError):
            BackfillRequest(limit=0)
