"""Deduplication and re-ranking of vector search hits into unique listings.

A listing's text may be split into several chunks, and each chunk is scored
independently, so one listing can appear many times in a raw search
response. These helpers collapse the hits to one ``RankedListing`` per
listing, keeping the best-scoring chunk.
"""

from collections.abc import Collection, Iterable

from marketplace.domain.entities import (
    ENTRY_SEPARATOR,
    RankedListing,
    VectorSearchEntry,
    VectorSearchHit,
)


def map_entries_to_listings(entries: Iterable[VectorSearchEntry]) -> dict[str, str]:
    """Build ``entry_id -> listing_id`` from the keys stored on each entry."""
    return {entry.entry_id: entry.key for entry in entries if entry.key}


def deduplicate_hits(
    hits: Iterable[VectorSearchHit],
    entry_to_listing: dict[str, str],
) -> dict[str, RankedListing]:
    """Keep only the highest-scoring hit per listing.

    Hits whose entry has no key fall back to the entry id as listing id.
    """
    best: dict[str, RankedListing] = {}
    for hit in hits:
        listing_id = entry_to_listing.get(hit.entry_id, hit.entry_id)
        existing = best.get(listing_id)
        if existing is None or hit.score > existing.score:
            best[listing_id] = RankedListing(
                listing_id=listing_id,
                score=hit.score,
                snippet=hit.matched_text,
            )
    return best


def rank_hits(
    hits: Iterable[VectorSearchHit],
    entries: Iterable[VectorSearchEntry],
    *,
    limit: int,
) -> list[RankedListing]:
    """Deduplicate hits by listing, sort by score descending, truncate to ``limit``."""
    best = deduplicate_hits(hits, map_entries_to_listings(entries))
    ranked = sorted(best.values(), key=lambda r: r.score, reverse=True)
    return ranked[: max(limit, 0)]


def build_context_text(
    entries: Iterable[VectorSearchEntry],
    listing_ids: Collection[str],
) -> str:
    """Join the text of entries that belong to one of ``listing_ids``, in index order."""
    return ENTRY_SEPARATOR.join(
        entry.text
        for entry in entries
        if (entry.key or entry.entry_id) in listing_ids and entry.text
    )
