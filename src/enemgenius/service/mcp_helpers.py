"""Client side of the knowledge base MCP server.

The Flask routes and the CLI reach the FastMCP server through these helpers:
calling a tool and decoding its JSON payload, probing whether the server is
up, and driving coroutines from synchronous Flask handlers.
"""

import asyncio
import json
import logging
from typing import Any

from fastmcp import Client as MCPClient

logger = logging.getLogger(__name__)


async def call_mcp_tool(
    server_url: str, tool_name: str, params: dict[str, Any] | None = None
) -> Any:
    """Call a tool on the MCP server at server_url and return its decoded result.

    Connection and tool errors propagate to the caller.
    """
    async with MCPClient(server_url) as client:
        result = await client.call_tool(tool_name, params or {})
    return extract_mcp_result(result)


def extract_mcp_result(result: Any) -> Any:
    """Unwrap a CallToolResult.

    The first text content is parsed as JSON when possible (the tools return
    dicts and lists); anything without content comes back unchanged.
    """
    content = getattr(result, "content", None)
    if not content:
        return result
    if not isinstance(content, list):
        return content

    text = content[0].text
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return text


def _server_name(client: Any) -> str | None:
    init_result = client.initialize_result
    if init_result and init_result.serverInfo:
        return init_result.serverInfo.name
    return None


async def check_mcp_server(url: str, timeout: float = 5.0) -> dict[str, Any]:
    """Check that an MCP server answers.

    Returns:
        dict: url and status ("connected" or "failed"), plus tools and
        server_name when connected, or error when not
    """
    try:
        async with asyncio.timeout(timeout):
            async with MCPClient(url) as client:
                tools = await client.list_tools() or []
                return {
                    "url": url,
                    "status": "connected",
                    "tools": [tool.name for tool in tools],
                    "server_name": _server_name(client),
                }
    except TimeoutError:
        logger.warning(f"⚠️ Timeout connecting to MCP server {url}")
        return {"url": url, "status": "failed", "error": f"Connection timeout ({timeout}s)"}
    except Exception as e:
        logger.warning(f"⚠️ Failed to connect to MCP server {url}: {e}")
        return {"url": url, "status": "failed", "error": str(e)}


def run_async(coro: Any) -> Any:
    """Run a coroutine to completion on a fresh event loop.

    For synchronous Flask handlers; CLI commands use asyncio.run() directly.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
