"""Unit tests for the OpenRouterEmbeddingProvider."""

import json

import httpx
import pytest

from marketplace.domain.exceptions import EmbeddingProviderError
from marketplace.infrastructure.openrouter import OpenRouterEmbeddingProvider


# ── Helpers ──


def _recording_transport(requests: list[dict], *, reverse: bool = False) -> httpx.MockTransport:
    """Echo one fake embedding per input text, recording each request payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        requests.append(payload)
        data = [
            {"index": i, "embedding": [float(i), float(len(text))]}
            for i, text in enumerate(payload["input"])
        ]
        if reverse:
            data.reverse()
        return httpx.Response(200, json={"data": data})

    return httpx.MockTransport(handler)


def _provider(transport: httpx.MockTransport, model: str = "google/gemini-embedding-001"):
    client = httpx.AsyncClient(transport=transport)
    return OpenRouterEmbeddingProvider(
        api_key="test-key",
        base_url="https://openrouter.test/api/v1/",
        model=model,
        model_dimensions=768,
        http_client=client,
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_generate_embeddings_orders_by_index():
    """Embeddings are returned in input order even when the API shuffles them."""
    requests: list[dict] = []
    provider = _provider(_recording_transport(requests, reverse=True))

    vectors = await provider.generate_embeddings(["a", "bb", "ccc"])

    assert vectors == [[0.0, 1.0], [1.0, 2.0], [2.0, 3.0]]
    assert requests[0]["model"] == "google/gemini-embedding-001"
    assert requests[0]["dimensions"] == 768
    assert requests[0]["input"] == ["a", "bb", "ccc"]


@pytest.mark.asyncio
async def test_request_targets_embeddings_endpoint_with_auth():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [{"index": 0, "embedding": [0.1]}]})

    provider = _provider(httpx.MockTransport(handler))
    await provider.generate_query_embedding("lamp")

    assert str(seen[0].url) == "https://openrouter.test/api/v1/embeddings"
    assert seen[0].headers["Authorization"] == "Bearer test-key"


@pytest.mark.asyncio
async def test_large_input_is_batched():
    requests: list[dict] = []
    provider = _provider(_recording_transport(requests))

    vectors = await provider.generate_embeddings([f"text {i}" for i in range(60)])

    assert len(vectors) == 60
    assert [len(r["input"]) for r in requests] == [50, 10]


@pytest.mark.asyncio
async def test_empty_input_makes_no_request():
    requests: list[dict] = []
    provider = _provider(_recording_transport(requests))

    assert await provider.generate_embeddings([]) == []
    assert requests == []


@pytest.mark.asyncio
async def test_query_embedding_returns_single_vector():
    requests: list[dict] = []
    provider = _provider(_recording_transport(requests))

    vector = await provider.generate_query_embedding("desk lamp")

    assert vector == [0.0, 9.0]
    assert requests[0]["input"] == ["desk lamp"]


@pytest.mark.asyncio
async def test_nomic_models_get_task_prefixes():
    requests: list[dict] = []
    provider = _provider(_recording_transport(requests), model="nomic-ai/nomic-embed-text-v1.5")

    await provider.generate_embeddings(["chair"])
    await provider.generate_query_embedding("chair")

    assert requests[0]["input"] == ["search_document: chair"]
    assert requests[1]["input"] == ["search_query: chair"]


@pytest.mark.asyncio
async def test_api_error_raises_provider_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(401, json={"error": {"message": "Invalid API key"}})
    )
    provider = _provider(transport)

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await provider.generate_embeddings(["chair"])

    assert exc_info.value.status_code == 401
    assert "Invalid API key" in exc_info.value.message


@pytest.mark.asyncio
async def test_transport_error_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    provider = _provider(httpx.MockTransport(handler))

    with pytest.raises(EmbeddingProviderError) as exc_info:
        await provider.generate_query_embedding("chair")

    assert exc_info.value.status_code == 0


@pytest.mark.asyncio
async def test_count_mismatch_raises_provider_error():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"data": [{"index": 0, "embedding": [0.1]}]})
    )
    provider = _provider(transport)

    with pytest.raises(EmbeddingProviderError):
        await provider.generate_embeddings(["a", "b"])
