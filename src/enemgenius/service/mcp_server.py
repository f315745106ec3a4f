"""FastMCP server exposing the ENEM Genius knowledge base."""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from dotenv import load_dotenv
from fastmcp import FastMCP

from enemgenius.constants import get_max_chunk_size, get_max_context_length
from enemgenius.rag import chunk_text, index_chunks, select_context
from enemgenius.service.database import KnowledgeStore

# Configure logging
log_level = os.getenv("LOG_LEVEL", "INFO")
logging.basicConfig(
    level=getattr(logging, log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()
logger.debug("Environment variables loaded for MCP server")

mcp = FastMCP("ENEM Genius Knowledge Base")


@contextmanager
def _open_store(store: KnowledgeStore | None) -> Iterator[KnowledgeStore]:
    """Use the given store, or open a short-lived one."""
    if store is not None:
        yield store
        return
    with KnowledgeStore() as kb:
        yield kb


async def retrieve_context_impl(
    topics: str,
    max_context_length: int | None = None,
    store: KnowledgeStore | None = None,
) -> dict[str, Any]:
    """Select context for the topics from the selected knowledge files."""
    budget = max_context_length if max_context_length is not None else get_max_context_length()
    logger.debug(f"MCP Tool: retrieve_context topics='{topics[:100]}', budget={budget}")

    with _open_store(store) as kb:
        files = kb.get_selected_files()

    chunks = [chunk for file in files for chunk in file.indexed_chunks]
    context = select_context(topics, chunks, budget)
    logger.info(
        f"✅ MCP Tool: Selected {len(context)} characters from {len(files)} file(s)"
    )
    return {
        "context": context,
        "length": len(context),
        "files": [file.name for file in files],
        "chunks_considered": len(chunks),
    }


async def list_knowledge_files_impl(store: KnowledgeStore | None = None) -> list[dict[str, Any]]:
    """List metadata of every stored knowledge file."""
    with _open_store(store) as kb:
        files = kb.get_all_files_meta()
    logger.info(f"📂 MCP Tool: Found {len(files)} knowledge file(s)")
    return [file.to_dict() for file in files]


async def chunk_document_impl(text: str, max_chunk_size: int | None = None) -> list[dict[str, Any]]:
    """Chunk and index a document text without storing it."""
    size = max_chunk_size if max_chunk_size is not None else get_max_chunk_size()
    chunks = index_chunks(chunk_text(text, size))
    logger.info(f"✂️ MCP Tool: Produced {len(chunks)} chunk(s) (max {size} chars)")
    return [chunk.to_dict() for chunk in chunks]


@mcp.tool()
async def retrieve_context(topics: str, max_context_length: int | None = None) -> dict[str, Any]:
    """
    Selects the passages of the selected knowledge files most relevant to the
    given topics, ranked by term frequency, and assembles them into a single
    context text no longer than max_context_length characters.
    Use this tool to ground ENEM questions on the uploaded course materials.

    Args:
        topics: Topics or keywords in Portuguese (e.g. "revolução industrial")
        max_context_length: Character budget (default: MAX_CONTEXT_LENGTH env or 12000)
    """
    try:
        return await retrieve_context_impl(topics, max_context_length)
    except Exception as e:
        error_msg = f"Unexpected error: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


@mcp.tool()
async def list_knowledge_files() -> list[dict[str, Any]]:
    """
    Lists the uploaded knowledge files with their id, name and whether they
    are selected for retrieval.
    """
    try:
        return await list_knowledge_files_impl()
    except Exception as e:
        error_msg = f"Error listing knowledge files: {type(e).__name__}: {e}"
        logger.error(f"❌ MCP Tool: {error_msg}", exc_info=True)
        raise ValueError(error_msg) from e


@mcp.tool()
async def chunk_document(text: str, max_chunk_size: int | None = None) -> list[dict[str, Any]]:
    """
    Splits a document into paragraph, list and sentence aware chunks and
    returns each chunk with its term-frequency index.

    Args:
        text: The document text
        max_chunk_size: Maximum characters per chunk (default: MAX_CHUNK_SIZE env or 1800)
    """
    return await chunk_document_impl(text, max_chunk_size)


def main() -> None:
    """Entry point for the MCP server command-line interface."""
    logger.info("🚀 Starting ENEM Genius MCP Server...")
    port = int(os.getenv("MCP_PORT", "8001"))
    mcp.run(transport="sse", host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
