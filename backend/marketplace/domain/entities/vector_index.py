"""Domain entities exchanged with the vector index."""

from dataclasses import dataclass, field

# Joins the text of separate entries in aggregated search context
ENTRY_SEPARATOR = "\n\n---\n\n"


@dataclass(frozen=True)
class ChunkContext:
    """How many neighbouring chunks to return around each matched chunk."""

    before: int = 0
    after: int = 0


@dataclass
class VectorNamespace:
    """A named group of vector index entries."""

    name: str
    id: int | None = None


@dataclass
class VectorEntryHandle:
    """Returned by the index when an entry is added."""

    entry_id: str


@dataclass
class VectorSearchHit:
    """A single scored chunk returned by a similarity search.

    ``content`` holds the matched chunk plus any requested context chunks in
    chunk order; ``start_order`` is the chunk index of ``content[0]`` and
    ``order`` the chunk index of the matched chunk.
    """

    entry_id: str
    score: float  # 0.0 – 1.0 (cosine similarity)
    order: int = 0
    start_order: int = 0
    content: list[str] = field(default_factory=list)

    @property
    def matched_text(self) -> str:
        """Text of the chunk that produced the score."""
        offset = self.order - self.start_order
        if 0 <= offset < len(self.content):
            return self.content[offset]
        return self.content[0] if self.content else ""


@dataclass
class VectorSearchEntry:
    """An entry referenced by one or more hits in a search response."""

    entry_id: str
    key: str | None = None
    text: str = ""


@dataclass
class VectorSearchResponse:
    """Full similarity search result: scored hits, their entries, aggregated text."""

    results: list[VectorSearchHit] = field(default_factory=list)
    entries: list[VectorSearchEntry] = field(default_factory=list)
    text: str = ""
