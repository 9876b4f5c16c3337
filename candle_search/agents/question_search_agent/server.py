"""MCP server exposing relationship prompt search over stdio.

Tools:
  - searchSimilarQuestions(query)
  - bulkSearchTopSimilarQuestions(queries, limit=3), unless disabled in Settings
"""
from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, List

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from candle_search.utils.config import Settings, load_settings
from candle_search.utils.logger import get_logger
from .errors import UnknownToolError
from .schemas import BulkSearchArgs, SearchSimilarQuestionsArgs, decode_arguments
from .tools import QuestionSearchTools

SERVER_NAME = "candle-question-search"
SERVER_VERSION = "0.1.0"

SEARCH_TOOL = "searchSimilarQuestions"
BULK_TOOL = "bulkSearchTopSimilarQuestions"

ToolHandler = Callable[[Dict[str, Any]], Awaitable[types.CallToolResult]]


def search_tool_descriptor() -> types.Tool:
    return types.Tool(
        name=SEARCH_TOOL,
        description="Finds similar questions from a structured corpus of relationship prompts.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "A question, phrase, or theme to search related prompts for",
                },
            },
            "required": ["query"],
        },
    )


def bulk_tool_descriptor(default_limit: int = 3) -> types.Tool:
    return types.Tool(
        name=BULK_TOOL,
        description=(
            "Runs several relationship prompt searches at once and returns the "
            "top-scoring questions for each query."
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "queries": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Questions, phrases, or themes to search related prompts for",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results to keep per query",
                    "default": default_limit,
                },
            },
            "required": ["queries"],
        },
    )


def text_response(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


class QuestionSearchMCPServer:
    """Tool registry and dispatcher for the question search tools."""

    def __init__(self, settings: Settings | None = None, tools: QuestionSearchTools | None = None):
        self.settings = settings or load_settings()
        self.logger = get_logger("question_search_mcp")
        self.tools = tools or QuestionSearchTools(self.settings)

        # Registration order is the order list_tools reports
        self._descriptors: List[types.Tool] = [search_tool_descriptor()]
        self._handlers: Dict[str, ToolHandler] = {SEARCH_TOOL: self._handle_search}
        if self.settings.bulk_search_enabled:
            self._descriptors.append(bulk_tool_descriptor(self.settings.bulk_default_limit))
            self._handlers[BULK_TOOL] = self._handle_bulk_search

    # --- Handlers ---
    async def handle_search(self, query: str) -> types.CallToolResult:
        results = await self.tools.search(query)
        return text_response(_dump([r.to_dict() for r in results]))

    async def handle_bulk_search(self, queries: List[str], limit: int | None = None) -> types.CallToolResult:
        if limit is None:
            limit = self.settings.bulk_default_limit
        result_map = await self.tools.bulk_search(queries, limit)
        return text_response(_dump(result_map))

    async def _handle_search(self, arguments: Dict[str, Any]) -> types.CallToolResult:
        args = decode_arguments(SearchSimilarQuestionsArgs, SEARCH_TOOL, arguments)
        return await self.handle_search(args.query)

    async def _handle_bulk_search(self, arguments: Dict[str, Any]) -> types.CallToolResult:
        args = decode_arguments(BulkSearchArgs, BULK_TOOL, arguments)
        return await self.handle_bulk_search(args.queries, args.limit)

    # --- Protocol endpoints ---
    async def list_tools(self) -> List[types.Tool]:
        return list(self._descriptors)

    async def call_tool(self, name: str, arguments: Dict[str, Any] | None) -> types.CallToolResult:
        """Route a call to its handler; every fault becomes an error-flagged result."""
        self.logger.info(f"Tool call: {name}")
        handler = self._handlers.get(name)
        if handler is None:
            return text_response(str(UnknownToolError(name)), is_error=True)
        try:
            return await handler(arguments or {})
        except Exception as e:
            self.logger.warning(f"Tool {name} failed: {e}")
            return text_response(f"Error: {e}", is_error=True)

    # --- MCP wiring ---
    def build(self) -> Server:
        server = Server(SERVER_NAME, version=SERVER_VERSION)

        @server.list_tools()
        async def _list_tools() -> List[types.Tool]:
            return await self.list_tools()

        # Registered directly so call_tool owns the CallToolResult and sees raw arguments
        async def _call_tool(req: types.CallToolRequest) -> types.ServerResult:
            result = await self.call_tool(req.params.name, req.params.arguments)
            return types.ServerResult(result)

        server.request_handlers[types.CallToolRequest] = _call_tool
        return server

    async def run(self) -> None:
        server = self.build()
        async with stdio_server() as (read_stream, write_stream):
            self.logger.info("Relationship prompt MCP server running via stdio")
            await server.run(read_stream, write_stream, server.create_initialization_options())
