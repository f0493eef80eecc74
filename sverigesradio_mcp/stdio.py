"""stdio transport: newline-delimited JSON-RPC over stdin/stdout.

For MCP clients that launch the server as a subprocess. stdout carries
protocol messages only, so logging goes to stderr.
"""

import asyncio
import json
import logging
import sys
from typing import IO

from .config import settings
from .engine.dispatcher import ToolDispatcher
from .engine.handlers import HandlerContext
from .mcp import PARSE_ERROR, jsonrpc_error
from .mcp.methods import MODERN_PROTOCOL_VERSION, MessageProcessor
from .services.sr_client import SRClient

logger = logging.getLogger(__name__)


async def serve(
    processor: MessageProcessor,
    reader: IO[str] = sys.stdin,
    writer: IO[str] = sys.stdout,
) -> None:
    """Answer JSON-RPC lines from ``reader`` until EOF."""
    while True:
        line = await asyncio.to_thread(reader.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue

        try:
            payload = json.loads(line)
        except json.JSONDecodeError:
            response = jsonrpc_error(None, PARSE_ERROR, "Parse error: invalid JSON")
        else:
            response = await processor.process(payload)

        if response is not None:
            writer.write(json.dumps(response, ensure_ascii=False) + "\n")
            writer.flush()


async def run() -> None:
    client = SRClient(
        base_url=settings.sr_api_base,
        timeout=settings.upstream_timeout_seconds,
        default_ttl_seconds=settings.default_cache_ttl_seconds,
    )
    processor = MessageProcessor(ToolDispatcher(HandlerContext(client=client)), MODERN_PROTOCOL_VERSION)
    logger.info("Sveriges Radio MCP server listening on stdio")
    try:
        await serve(processor)
    finally:
        await client.aclose()


def main():
    """Run the stdio transport."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
