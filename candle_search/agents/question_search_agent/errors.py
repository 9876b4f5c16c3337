"""Error taxonomy for the question search tools."""
from __future__ import annotations


class QuestionSearchError(Exception):
    """Base class for every fault raised by the question search tools."""


class RemoteSearchError(QuestionSearchError):
    """Trieve answered with a non-success status."""

    def __init__(self, status_code: int, reason: str, message: str | None = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message or f"Trieve API error: {reason} {status_code}")


class ResponseShapeError(RemoteSearchError):
    """Trieve answered 2xx but the body is not the expected chunk list."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code, detail, f"Unexpected Trieve response ({status_code}): {detail}")


class UnknownToolError(QuestionSearchError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ArgumentShapeError(QuestionSearchError):
    def __init__(self, tool_name: str, detail: str):
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Invalid arguments for {tool_name}: {detail}")
