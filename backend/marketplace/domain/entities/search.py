"""Domain entities for semantic product search results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RankedListing:
    """A listing id with the best score and snippet among its matching chunks."""

    listing_id: str
    score: float
    snippet: str = ""


@dataclass
class ProductSearchResult:
    """A live, active listing returned by product search."""

    listing_id: str
    title: str
    description: str
    price: float
    category: str
    score: float


@dataclass
class RagSearchResult:
    """A product search result carrying the matched text snippet."""

    listing_id: str
    title: str
    description: str
    price: float
    category: str
    snippet: str
    score: float


@dataclass
class ProductSearchResponse:
    results: list[ProductSearchResult] = field(default_factory=list)


@dataclass
class RagSearchResponse:
    results: list[RagSearchResult] = field(default_factory=list)
    text: str = ""


@dataclass
class BackfillResult:
    """Outcome of re-embedding a batch of active listings."""

    processed: int = 0
    errors: int = 0
