from .listing_repository import SQLAlchemyListingRepository

__all__ = [
    "SQLAlchemyListingRepository",
]
