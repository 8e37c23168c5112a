"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidListingStateError(Exception):
    """Raised when a listing transition is not allowed from its current state."""

    def __init__(self, listing_id: str, message: str):
        self.listing_id = listing_id
        self.message = message
        super().__init__(f"Listing '{listing_id}': {message}")


class VectorIndexError(Exception):
    """Raised when the vector index fails to add, delete, or search entries."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Vector index {operation} failed: {message}")


class EmbeddingProviderError(Exception):
    """Raised when an embedding provider returns an error.

    Provider-agnostic — works for OpenRouter, Gemini, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")
