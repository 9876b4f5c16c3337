from __future__ import annotations

import asyncio
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Sequence, Tuple

import httpx

from candle_search.utils.logger import get_logger
from candle_search.utils.config import Settings
from .errors import RemoteSearchError, ResponseShapeError
from .schemas import ScoredChunk, decode_search_response


@dataclass(frozen=True)
class SearchResult:
    id: Any
    questionType: Any
    category: Any
    text: Any
    score: float

    @classmethod
    def from_chunk(cls, scored: ScoredChunk) -> "SearchResult":
        meta = scored.chunk.metadata
        return cls(
            id=scored.chunk.tracking_id,
            questionType=meta.questionType if meta else None,
            category=meta.category if meta else None,
            text=meta.content if meta else None,
            score=scored.score,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def projection(self) -> Dict[str, Any]:
        """Compact form used by bulk search: text, score and category only."""
        out = {"text": self.text, "score": self.score, "category": self.category}
        return {k: v for k, v in out.items() if v is not None}


BulkResultMap = Dict[str, List[Dict[str, Any]]]


def rank_top(results: Sequence[SearchResult], limit: int) -> List[SearchResult]:
    # sorted() is stable with reverse=True, so ties keep Trieve's order
    return sorted(results, key=lambda r: r.score, reverse=True)[: max(limit, 0)]


class QuestionSearchTools:
    """Search over the relationship prompt corpus hosted on Trieve.

    Ranking happens remotely; this class only shapes the request,
    normalizes the chunk list and, for bulk search, re-sorts and truncates.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.logger = get_logger("question_search")

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": self.settings.trieve_api_key,
            "TR-Dataset": self.settings.trieve_dataset_id,
            "TR-Organization": self.settings.trieve_org_id,
            "Content-Type": "application/json",
        }

    def _payload(self, query: str) -> Dict[str, Any]:
        return {
            "filters": {},
            "page": 1,
            "page_size": self.settings.page_size,
            "typo_options": {"correct_typos": True},
            "query": query,
            "search_type": "hybrid",
            "use_weights": True,
        }

    async def search(self, query: str) -> List[SearchResult]:
        """Run one hybrid search against Trieve. Single round trip, no retry."""
        url = f"{self.settings.trieve_api_url}/chunk/search"
        self.logger.debug(f"POST {url} query={query!r} page_size={self.settings.page_size}")
        async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
            resp = await client.post(url, headers=self._headers(), json=self._payload(query))

        if not resp.is_success:
            raise RemoteSearchError(resp.status_code, resp.reason_phrase)

        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseShapeError(resp.status_code, f"body is not JSON ({e})") from e

        parsed = decode_search_response(data, resp.status_code)
        results = [SearchResult.from_chunk(c) for c in parsed.chunks]
        self.logger.info(f"Trieve returned {len(results)} results for {query!r}")
        return results

    async def _search_top(self, query: str, limit: int) -> Tuple[str, List[Dict[str, Any]]]:
        try:
            results = await self.search(query)
        except Exception as e:
            self.logger.warning(f"Search failed for {query!r}: {e}")
            return query, []
        return query, [r.projection() for r in rank_top(results, limit)]

    async def bulk_search(self, queries: Sequence[str], limit: int = 3) -> BulkResultMap:
        """Search every query concurrently and keep the top `limit` hits of each.

        A failing query maps to an empty list and never affects its siblings.
        Repeated query strings collapse to one key (last one written wins).
        """
        pairs = await asyncio.gather(*(self._search_top(q, limit) for q in queries))
        return dict(pairs)
