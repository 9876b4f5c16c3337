from __future__ import annotations

import json

import httpx
import pytest
import respx

from candle_search.utils.config import Settings

BASE_URL = "https://trieve.test/api"
SEARCH_URL = f"{BASE_URL}/chunk/search"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        trieve_api_url=BASE_URL,
        trieve_api_key="tr-test-key",
        trieve_dataset_id="dataset-123",
        trieve_org_id="org-456",
        page_size=20,
        bulk_search_enabled=True,
        bulk_default_limit=3,
        request_timeout=5.0,
    )


@pytest.fixture
def trieve():
    with respx.mock(assert_all_called=False) as mock:
        yield mock


def _chunk(tracking_id: str, score: float, content: str | None = None, category: str | None = None,
           question_type: str | None = None) -> dict:
    metadata = {}
    if content is not None:
        metadata["content"] = content
    if category is not None:
        metadata["category"] = category
    if question_type is not None:
        metadata["questionType"] = question_type
    return {"chunk": {"tracking_id": tracking_id, "metadata": metadata}, "score": score}


def _per_query(responses: dict):
    """respx side effect answering each query from `responses` (status int or chunk list)."""

    def _respond(request: httpx.Request) -> httpx.Response:
        query = json.loads(request.content)["query"]
        answer = responses[query]
        if isinstance(answer, int):
            return httpx.Response(answer)
        return httpx.Response(200, json={"chunks": answer})

    return _respond


@pytest.fixture
def search_url() -> str:
    return SEARCH_URL


@pytest.fixture
def make_chunk():
    return _chunk


@pytest.fixture
def per_query():
    return _per_query
