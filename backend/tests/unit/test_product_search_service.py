"""Unit tests for the ProductSearchService: ranking, deduplication and live-status filtering."""

import pytest

from marketplace.application.services import ListingEmbeddingService, ProductSearchService
from marketplace.domain.entities import (
    ChunkContext,
    ListingStatus,
    VectorSearchEntry,
    VectorSearchHit,
    VectorSearchResponse,
)
from fakes import FakeListingRepository, FakeVectorIndex, make_listing


# ── Fixtures ─────────────────────────────────────────────────────────


def _catalog() -> list:
    return [
        make_listing("Calculus Textbook", "Barely used", listing_id="L1", price=35.0),
        make_listing("Desk Lamp", "LED, warm light", listing_id="L2", category="furniture"),
        make_listing("Mini Fridge", "Fits under a desk", listing_id="L3", category="appliances"),
    ]


async def _indexed(listings) -> tuple[FakeListingRepository, FakeVectorIndex]:
    repo = FakeListingRepository(listings)
    index = FakeVectorIndex()
    embedder = ListingEmbeddingService(repo, index, namespace="products")
    for listing in listings:
        await embedder.embed_listing(listing.id)
    return repo, index


def _search_service(repo, index, **kwargs) -> ProductSearchService:
    return ProductSearchService(repo, index, namespace="products", **kwargs)


def _hit(entry_id: str, score: float, text: str) -> VectorSearchHit:
    return VectorSearchHit(entry_id=entry_id, score=score, content=[text])


# ── Tests ────────────────────────────────────────────────────────────


class TestSearchProducts:

    @pytest.mark.asyncio
    async def test_finds_embedded_listing(self):
        repo, index = await _indexed(_catalog())

        response = await _search_service(repo, index).search_products("calculus book")

        assert [r.listing_id for r in response.results][0] == "L1"
        top = response.results[0]
        assert top.title == "Calculus Textbook"
        assert top.price == 35.0
        assert top.score > 0

    @pytest.mark.asyncio
    async def test_sold_listing_is_not_returned(self):
        repo, index = await _indexed(_catalog())
        repo.set_status("L1", ListingStatus.SOLD)

        response = await _search_service(repo, index).search_products("calculus book")

        # The vector entry still exists, but the listing is no longer active
        assert index.live_entries_for("L1")
        assert "L1" not in [r.listing_id for r in response.results]

    @pytest.mark.asyncio
    async def test_missing_listing_is_dropped(self):
        repo, index = await _indexed(_catalog())
        index.canned_response = VectorSearchResponse(
            results=[_hit("e-ghost", 0.95, "ghost"), _hit("e-1", 0.5, "calc")],
            entries=[
                VectorSearchEntry(entry_id="e-ghost", key="deleted-listing"),
                VectorSearchEntry(entry_id="e-1", key="L1"),
            ],
        )

        response = await _search_service(repo, index).search_products("anything")

        assert [r.listing_id for r in response.results] == ["L1"]

    @pytest.mark.asyncio
    async def test_never_indexed_namespace_returns_empty(self):
        repo = FakeListingRepository(_catalog())
        index = FakeVectorIndex()

        response = await _search_service(repo, index).search_products("calculus book")

        assert response.results == []
        assert index.search_calls == []

    @pytest.mark.asyncio
    async def test_nothing_above_threshold_returns_empty(self):
        repo, index = await _indexed(_catalog())

        response = await _search_service(repo, index).search_products("bicycle helmet")

        assert response.results == []

    @pytest.mark.asyncio
    async def test_keeps_best_chunk_per_listing(self):
        repo = FakeListingRepository(_catalog())
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[
                _hit("e-1", 0.4, "weak chunk"),
                _hit("e-2", 0.6, "lamp chunk"),
                _hit("e-1b", 0.9, "strong chunk"),
            ],
            entries=[
                VectorSearchEntry(entry_id="e-1", key="L1"),
                VectorSearchEntry(entry_id="e-1b", key="L1"),
                VectorSearchEntry(entry_id="e-2", key="L2"),
            ],
        )

        response = await _search_service(repo, index).search_listings_rag("q")

        assert [r.listing_id for r in response.results] == ["L1", "L2"]
        assert response.results[0].score == 0.9
        assert response.results[0].snippet == "strong chunk"

    @pytest.mark.asyncio
    async def test_results_are_unique_and_active(self):
        listings = _catalog() + [
            make_listing("Calculus Notes", "Old draft", listing_id="L4", status=ListingStatus.DRAFT),
        ]
        repo = FakeListingRepository(listings)
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[
                _hit("a", 0.8, "x"),
                _hit("b", 0.7, "y"),
                _hit("c", 0.75, "z"),
                _hit("d", 0.9, "w"),
            ],
            entries=[
                VectorSearchEntry(entry_id="a", key="L1"),
                VectorSearchEntry(entry_id="b", key="L1"),
                VectorSearchEntry(entry_id="c", key="L3"),
                VectorSearchEntry(entry_id="d", key="L4"),
            ],
        )

        response = await _search_service(repo, index).search_products("q")

        ids = [r.listing_id for r in response.results]
        assert ids == ["L1", "L3"]
        assert len(ids) == len(set(ids))
        for listing_id in ids:
            assert repo.stored(listing_id).status == ListingStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_entry_without_key_falls_back_to_entry_id(self):
        repo = FakeListingRepository(_catalog())
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[_hit("L2", 0.7, "lamp")],
            entries=[VectorSearchEntry(entry_id="L2", key=None)],
        )

        response = await _search_service(repo, index).search_products("lamp")

        assert [r.listing_id for r in response.results] == ["L2"]

    @pytest.mark.asyncio
    async def test_overfetches_and_truncates_to_limit(self):
        listings = [make_listing(f"Chair {i}", "wooden chair", listing_id=f"C{i}") for i in range(6)]
        repo, index = await _indexed(listings)

        response = await _search_service(repo, index, overfetch_factor=3).search_products(
            "chair", limit=2
        )

        assert len(response.results) == 2
        assert index.search_calls[-1]["limit"] == 6
        assert index.search_calls[-1]["chunk_context"] is None

    @pytest.mark.asyncio
    async def test_uses_configured_threshold_and_default_limit(self):
        repo, index = await _indexed(_catalog())

        await _search_service(repo, index, score_threshold=0.55, default_limit=4).search_products(
            "desk"
        )

        call = index.search_calls[-1]
        assert call["score_threshold"] == 0.55
        assert call["limit"] == 8

    @pytest.mark.asyncio
    async def test_results_sorted_by_score(self):
        repo = FakeListingRepository(_catalog())
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[_hit("a", 0.5, "a"), _hit("b", 0.85, "b"), _hit("c", 0.65, "c")],
            entries=[
                VectorSearchEntry(entry_id="a", key="L1"),
                VectorSearchEntry(entry_id="b", key="L2"),
                VectorSearchEntry(entry_id="c", key="L3"),
            ],
        )

        response = await _search_service(repo, index).search_products("q")

        assert [r.score for r in response.results] == [0.85, 0.65, 0.5]

    @pytest.mark.asyncio
    async def test_store_failure_skips_listing(self):
        repo, index = await _indexed(_catalog())
        repo.failing_ids.add("L1")

        response = await _search_service(repo, index).search_products("calculus desk")

        assert {r.listing_id for r in response.results} == {"L2", "L3"}

    @pytest.mark.asyncio
    async def test_zero_limit_returns_nothing(self):
        repo, index = await _indexed(_catalog())

        response = await _search_service(repo, index, default_limit=5).search_products(
            "calculus desk", limit=0
        )

        assert response.results == []
        assert index.search_calls[-1]["limit"] == 0


class TestSearchListingsRag:

    @pytest.mark.asyncio
    async def test_returns_snippet_and_text(self):
        repo, index = await _indexed(_catalog())

        response = await _search_service(repo, index).search_listings_rag("calculus book")

        assert response.results[0].listing_id == "L1"
        assert response.results[0].snippet
        assert "Calculus Textbook" in response.text

    @pytest.mark.asyncio
    async def test_passes_chunk_context_and_threshold(self):
        repo, index = await _indexed(_catalog())
        context = ChunkContext(before=2, after=1)

        await _search_service(repo, index, rag_chunk_context=context).search_listings_rag(
            "lamp", limit=3, score_threshold=0.1
        )

        call = index.search_calls[-1]
        assert call["chunk_context"] == context
        assert call["score_threshold"] == 0.1
        assert call["limit"] == 6

    @pytest.mark.asyncio
    async def test_default_chunk_context(self):
        repo, index = await _indexed(_catalog())

        await _search_service(repo, index).search_listings_rag("lamp")

        assert index.search_calls[-1]["chunk_context"] == ChunkContext(before=1, after=0)
        assert index.search_calls[-1]["limit"] == 16

    @pytest.mark.asyncio
    async def test_never_indexed_namespace(self):
        response = await _search_service(
            FakeListingRepository(), FakeVectorIndex()
        ).search_listings_rag("anything")

        assert response.results == []
        assert response.text == ""

    @pytest.mark.parametrize("threshold", [0.0, 0.3])
    @pytest.mark.asyncio
    async def test_threshold_override_is_respected(self, threshold):
        repo, index = await _indexed(_catalog())

        await _search_service(repo, index).search_listings_rag("lamp", score_threshold=threshold)

        assert index.search_calls[-1]["score_threshold"] == threshold

    @pytest.mark.asyncio
    async def test_zero_limit_returns_nothing(self):
        repo, index = await _indexed(_catalog())

        response = await _search_service(repo, index, rag_default_limit=5).search_listings_rag(
            "calculus lamp", limit=0
        )

        assert response.results == []
        assert response.text == ""
        assert index.search_calls[-1]["limit"] == 0

    @pytest.mark.asyncio
    async def test_text_excludes_inactive_listings(self):
        repo = FakeListingRepository(_catalog())
        repo.set_status("L2", ListingStatus.SOLD)
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[_hit("e1", 0.9, "calculus"), _hit("e2", 0.8, "lamp")],
            entries=[
                VectorSearchEntry(entry_id="e1", key="L1", text="Calculus Textbook\nBarely used"),
                VectorSearchEntry(entry_id="e2", key="L2", text="Desk Lamp\nLED, warm light"),
            ],
            text="Calculus Textbook\nBarely used\n\n---\n\nDesk Lamp\nLED, warm light",
        )

        response = await _search_service(repo, index).search_listings_rag("calculus lamp")

        assert [r.listing_id for r in response.results] == ["L1"]
        assert response.text == "Calculus Textbook\nBarely used"

    @pytest.mark.asyncio
    async def test_text_joins_surviving_entries(self):
        repo = FakeListingRepository(_catalog())
        index = FakeVectorIndex(namespaces=["products"])
        index.canned_response = VectorSearchResponse(
            results=[_hit("e1", 0.9, "calculus"), _hit("e3", 0.7, "fridge")],
            entries=[
                VectorSearchEntry(entry_id="e1", key="L1", text="Calculus Textbook"),
                VectorSearchEntry(entry_id="e9", key="gone", text="Removed listing"),
                VectorSearchEntry(entry_id="e3", key="L3", text="Mini Fridge"),
            ],
        )

        response = await _search_service(repo, index).search_listings_rag("q")

        assert response.text == "Calculus Textbook\n\n---\n\nMini Fridge"
