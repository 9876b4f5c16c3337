"""Decode models for Trieve search responses and tool call arguments."""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ArgumentShapeError, ResponseShapeError


class ChunkMetadata(BaseModel):
    # Free-form JSON on the Trieve side; values pass through untyped
    questionType: Any = None
    category: Any = None
    content: Any = None


class Chunk(BaseModel):
    tracking_id: Any = None
    metadata: Optional[ChunkMetadata] = None


class ScoredChunk(BaseModel):
    chunk: Chunk
    score: float


class SearchResponse(BaseModel):
    chunks: List[ScoredChunk]


class SearchSimilarQuestionsArgs(BaseModel):
    query: str


class BulkSearchArgs(BaseModel):
    queries: List[str]
    limit: Optional[int] = Field(default=None, ge=0)

    @field_validator("queries", mode="before")
    @classmethod
    def _reject_bare_string(cls, v: Any) -> Any:
        # A lone string would otherwise iterate character by character upstream
        if isinstance(v, str):
            raise ValueError("queries must be a list of strings")
        return v


ArgsT = TypeVar("ArgsT", bound=BaseModel)


def decode_search_response(payload: Any, status_code: int = 200) -> SearchResponse:
    try:
        return SearchResponse.model_validate(payload)
    except ValidationError as e:
        raise ResponseShapeError(status_code, _summarize(e)) from e


def decode_arguments(model: Type[ArgsT], tool_name: str, arguments: Dict[str, Any] | None) -> ArgsT:
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        raise ArgumentShapeError(tool_name, _summarize(e)) from e


def _summarize(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)
