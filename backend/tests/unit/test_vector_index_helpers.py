"""Unit tests for vector index value objects and text assembly helpers."""

from marketplace.domain.entities import VectorSearchHit
from marketplace.infrastructure.vector_index.pg_vector_index import GAP_MARKER, build_entry_text


class TestBuildEntryText:

    def test_adjacent_chunks_joined_by_newline(self):
        assert build_entry_text([0, 1], {0: "a", 1: "b"}) == "a\nb"

    def test_gap_between_chunks_is_marked(self):
        texts = {0: "intro", 1: "middle", 4: "late"}
        assert build_entry_text([0, 1, 4], texts) == f"intro\nmiddle{GAP_MARKER}late"

    def test_single_chunk(self):
        assert build_entry_text([2], {2: "only"}) == "only"


class TestMatchedText:

    def test_picks_matched_chunk_inside_context(self):
        hit = VectorSearchHit(
            entry_id="e1", score=0.9, order=5, start_order=4, content=["before", "match", "after"]
        )
        assert hit.matched_text == "match"

    def test_without_context(self):
        hit = VectorSearchHit(entry_id="e1", score=0.9, content=["match"])
        assert hit.matched_text == "match"

    def test_out_of_range_offset_falls_back_to_first_chunk(self):
        hit = VectorSearchHit(entry_id="e1", score=0.9, order=9, start_order=0, content=["first"])
        assert hit.matched_text == "first"

    def test_empty_content(self):
        assert VectorSearchHit(entry_id="e1", score=0.9).matched_text == ""
