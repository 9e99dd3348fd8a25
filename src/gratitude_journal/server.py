"""Gratitude journal MCP server and command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# MCP imports are optional - only needed when running the server
try:
    from mcp.server import Server  # pragma: no cover
    from mcp.server.stdio import stdio_server  # pragma: no cover
    from mcp.types import Tool, TextContent  # pragma: no cover
    HAS_MCP = True  # pragma: no cover
except ImportError:
    HAS_MCP = False
    Server = None  # type: ignore
    Tool = None  # type: ignore
    TextContent = None  # type: ignore

from .config import JournalConfig, load_config
from .engine import JournalEngine
from .errors import JournalError
from .models import parse_day
from .reminders import ReminderTracker
from .tools import execute_tool, make_tools


def create_server(config: JournalConfig, reminders: Optional[ReminderTracker] = None) -> "Server":
    """Create and configure the MCP server.

    Args:
        config: Journal configuration
        reminders: Reminder tracker (default: one backed by config's preferences)

    Returns:
        Configured MCP Server instance

    Raises:
        ImportError: If MCP package is not installed
    """
    if not HAS_MCP:
        raise ImportError(
            "MCP package not installed. Install with: pip install gratitude-journal[mcp]"
        )

    server = Server("gratitude-journal")
    engine = JournalEngine(config)
    engine.ensure_directories()
    if reminders is None:
        reminders = ReminderTracker(config)
    tool_defs = make_tools(engine)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """Return list of available tools."""
        return [
            Tool(
                name=t["name"],
                description=t["description"],
                inputSchema=t["inputSchema"],
            )
            for t in tool_defs.values()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool invocation."""
        result = await execute_tool(engine, name, arguments or {}, reminders=reminders)
        return [TextContent(type="text", text=json.dumps(result, indent=2, default=str))]

    return server


async def run_server(config: JournalConfig) -> None:
    """Run the MCP server with stdio transport."""
    if not HAS_MCP:
        raise ImportError(
            "MCP package not installed. Install with: pip install gratitude-journal[mcp]"
        )

    server = create_server(config)  # pragma: no cover

    async with stdio_server() as (read_stream, write_stream):  # pragma: no cover
        await server.run(  # pragma: no cover
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Gratitude Journal - daily entries with a durable edit history"
    )
    parser.add_argument(
        "--journal-dir",
        "-d",
        type=Path,
        default=None,
        help="Journal directory (default: $GRATITUDE_JOURNAL_DIR or ~/OneDrive/GratitudeJournal)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Path to config file (default: auto-detect in journal directory)",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create the journal and changelog directories",
    )
    parser.add_argument(
        "--show",
        metavar="DATE",
        help="Print the latest entries for DATE (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--history",
        metavar="DATE",
        help="Print every retained snapshot for DATE (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # stdout carries the MCP protocol, so logs go to stderr.
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.journal_dir, args.config)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    engine = JournalEngine(config)

    if args.init:
        try:
            engine.ensure_directories()
        except JournalError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Initialized journal in {config.get_journal_path()}")
        print(f"  - {config.log_dir}/")
        return

    if args.show or args.history:
        try:
            if args.show:
                day = parse_day(args.show)
                print(f"# {config.heading}")
                print(f"## {engine.display_date(day)}")
                for index, entry in enumerate(engine.load_entries(day), start=1):
                    print(f"{index}. {entry}")
            else:
                day = parse_day(args.history)
                for snapshot in engine.load_history(day):
                    print(json.dumps(snapshot, ensure_ascii=False))
        except (JournalError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        return

    if not HAS_MCP:
        print("Error: MCP package not installed.", file=sys.stderr)
        print("Install with: pip install gratitude-journal[mcp]", file=sys.stderr)
        sys.exit(1)

    asyncio.run(run_server(config))


if __name__ == "__main__":  # pragma: no cover
    main()
