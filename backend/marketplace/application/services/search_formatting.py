"""Result formatting — shapes ranked listings into search results and assistant text."""

from marketplace.domain.entities import (
    Listing,
    ProductSearchResult,
    RagSearchResult,
    RankedListing,
)

_DESCRIPTION_PREVIEW_CHARS = 150
_SNIPPET_PREVIEW_CHARS = 200

NO_PRODUCTS_MESSAGE = (
    "No products found matching your search. "
    "Try different search terms or browse our categories."
)
NO_RAG_PRODUCTS_MESSAGE = "No products found matching your search. Try refining the query."
_CITATION_HINT = (
    "Reference products using [[product:1,2,3]] format when recommending them to the user."
)


def to_product_result(ranked: RankedListing, listing: Listing) -> ProductSearchResult:
    return ProductSearchResult(
        listing_id=listing.id or ranked.listing_id,
        title=listing.title,
        description=listing.description,
        price=listing.price,
        category=listing.category,
        score=ranked.score,
    )


def to_rag_result(ranked: RankedListing, listing: Listing) -> RagSearchResult:
    return RagSearchResult(
        listing_id=listing.id or ranked.listing_id,
        title=listing.title,
        description=listing.description,
        price=listing.price,
        category=listing.category,
        snippet=ranked.snippet,
        score=ranked.score,
    )


def format_products_for_agent(results: list[ProductSearchResult]) -> str:
    """Render product results as numbered blocks an assistant can cite."""
    if not results:
        return NO_PRODUCTS_MESSAGE

    blocks = []
    for ref_num, result in enumerate(results, start=1):
        description = _clip(result.description, _DESCRIPTION_PREVIEW_CHARS)
        blocks.append(
            f"[{ref_num}] ID: {result.listing_id}\n"
            f"Title: {result.title}\n"
            f"Price: ${result.price:.2f}\n"
            f"Category: {result.category}\n"
            f"Description: {description}\n"
            "---"
        )

    body = "\n\n".join(blocks)
    return f"Found {len(results)} matching products:\n\n{body}\n\n{_CITATION_HINT}"


def format_rag_results_for_agent(results: list[RagSearchResult]) -> str:
    """Render RAG results with their matched snippets as numbered blocks."""
    if not results:
        return NO_RAG_PRODUCTS_MESSAGE

    blocks = []
    for ref_num, result in enumerate(results, start=1):
        snippet = (
            result.snippet[:_SNIPPET_PREVIEW_CHARS]
            or result.description[:_SNIPPET_PREVIEW_CHARS]
            or "No additional context available."
        )
        ellipsis = "..." if len(snippet) >= _SNIPPET_PREVIEW_CHARS else ""
        blocks.append(
            f"[{ref_num}] ID: {result.listing_id}\n"
            f"Title: {result.title}\n"
            f"Price: ${result.price:.2f}\n"
            f"Category: {result.category}\n"
            f"Snippet: {snippet}{ellipsis}\n"
            "---"
        )

    body = "\n\n".join(blocks)
    return (
        f"Found {len(results)} matching products with semantic context:\n\n"
        f"{body}\n\n{_CITATION_HINT}"
    )


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}..."
