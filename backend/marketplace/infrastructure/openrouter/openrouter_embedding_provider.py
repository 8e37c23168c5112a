"""EmbeddingProvider adapter for the OpenRouter ``/embeddings`` endpoint.

Listings are embedded with ``google/gemini-embedding-001`` by default,
truncated to ``model_dimensions`` so vectors fit the pgvector column.
"""

import logging

import httpx

from marketplace.application.interfaces.embedding_provider import EmbeddingProvider
from marketplace.domain.exceptions import EmbeddingProviderError

logger = logging.getLogger(__name__)

_PROVIDER = "openrouter"
_MAX_BATCH_SIZE = 50
_TIMEOUT_SECONDS = 60.0

# Task prefixes, only for nomic-embed-text models
_TASK_PREFIXES = {"document": "search_document: ", "query": "search_query: "}


class OpenRouterEmbeddingProvider(EmbeddingProvider):
    """Generates document and query embeddings through OpenRouter.

    An injected ``http_client`` is reused and left open; otherwise a client
    is opened for each request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://openrouter.ai/api/v1",
        app_name: str = "Marketplace Search",
        model: str = "google/gemini-embedding-001",
        model_dimensions: int = 768,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._endpoint = f"{base_url.rstrip('/')}/embeddings"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "X-Title": app_name,
        }
        self._model = model
        self._dimensions = model_dimensions
        self._http_client = http_client

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def generate_embeddings(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for start in range(0, len(texts), _MAX_BATCH_SIZE):
            batch = texts[start : start + _MAX_BATCH_SIZE]
            vectors.extend(await self._request(batch, task="document"))
        return vectors

    async def generate_query_embedding(self, query: str) -> list[float]:
        (vector,) = await self._request([query], task="query")
        return vector

    async def _request(self, texts: list[str], *, task: str) -> list[list[float]]:
        if not texts:
            return []

        body = {
            "model": self._model,
            "input": self._with_task_prefix(texts, task),
            "dimensions": self._dimensions,
        }

        if self._http_client is not None:
            response = await self._post(self._http_client, body)
        else:
            async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS) as client:
                response = await self._post(client, body)

        vectors = _parse_vectors(response, expected=len(texts))
        logger.info(
            "Embedded %d %s text(s) with %s (%d dims)",
            len(vectors),
            task,
            self._model,
            len(vectors[0]),
        )
        return vectors

    async def _post(self, client: httpx.AsyncClient, body: dict) -> httpx.Response:
        try:
            response = await client.post(self._endpoint, headers=self._headers, json=body)
        except httpx.HTTPError as e:
            logger.error("Embedding request to %s failed: %s", self._endpoint, e)
            raise EmbeddingProviderError(_PROVIDER, 0, str(e)) from e

        if response.status_code != 200:
            detail = response.text[:500]
            logger.error("Embedding API returned %d: %s", response.status_code, detail)
            raise EmbeddingProviderError(_PROVIDER, response.status_code, detail)
        return response

    def _with_task_prefix(self, texts: list[str], task: str) -> list[str]:
        if "nomic" not in self._model.lower():
            return texts
        prefix = _TASK_PREFIXES[task]
        return [prefix + text for text in texts]


def _parse_vectors(response: httpx.Response, *, expected: int) -> list[list[float]]:
    """Pull embeddings out of an OpenAI-style body, restoring input order."""
    items = sorted(response.json().get("data", []), key=lambda item: item.get("index", 0))
    if len(items) != expected:
        raise EmbeddingProviderError(
            _PROVIDER,
            response.status_code,
            f"expected {expected} embeddings, got {len(items)}",
        )
    return [item["embedding"] for item in items]
