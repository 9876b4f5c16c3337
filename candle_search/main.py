"""Candle question search - MCP server entrypoint.
Runs the stdio MCP server by default; the flags below call a tool once for debugging.
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from candle_search.utils.logger import get_logger
from candle_search.utils.config import load_settings
from candle_search.agents.question_search_agent.server import QuestionSearchMCPServer, SEARCH_TOOL, BULK_TOOL


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Relationship prompt search exposed as MCP tools over stdio",
        epilog="Without flags the MCP server is started on stdin/stdout.",
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--list-tools", action="store_true", help="Print the registered tool descriptors and exit")
    mode.add_argument("--query", type=str, default=None, help=f"Run {SEARCH_TOOL} once for this query")
    mode.add_argument("--bulk", nargs="+", metavar="QUERY", default=None, help=f"Run {BULK_TOOL} once for these queries")
    p.add_argument("--limit", type=int, default=None, help="Results kept per query with --bulk")
    return p.parse_args(argv)


async def _one_shot(server: QuestionSearchMCPServer, args: argparse.Namespace) -> int:
    if args.list_tools:
        tools = await server.list_tools()
        print(json.dumps([t.model_dump(exclude_none=True) for t in tools], indent=2))
        return 0

    if args.query is not None:
        result = await server.call_tool(SEARCH_TOOL, {"query": args.query})
    else:
        arguments = {"queries": args.bulk}
        if args.limit is not None:
            arguments["limit"] = args.limit
        result = await server.call_tool(BULK_TOOL, arguments)

    for item in result.content:
        print(item.text)
    return 1 if result.isError else 0


def main(argv: Optional[List[str]] = None) -> int:
    logger = get_logger("main")
    args = parse_args(argv)
    server = QuestionSearchMCPServer(load_settings())

    if args.list_tools or args.query is not None or args.bulk is not None:
        return asyncio.run(_one_shot(server, args))

    try:
        asyncio.run(server.run())
    except Exception as e:
        logger.error(f"Fatal error running server: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
