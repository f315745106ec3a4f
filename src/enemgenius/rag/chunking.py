"""Semantic chunking of document text.

Documents are first segmented into blocks (paragraphs and whole lists), then
the blocks are packed into chunks bounded by a maximum size. Blocks that are
too large on their own are split between list items or between sentences.
A single sentence or list item is never split, even when it exceeds the
maximum size.

Sentence detection is a regular expression and will split after
abbreviations such as "Dr.".
"""

import logging
import re

from enemgenius.constants import DEFAULT_MAX_CHUNK_SIZE

logger = logging.getLogger(__name__)

# Bullet (*, +, -), numbered (1.) or lettered (a)) marker followed by whitespace
_LIST_ITEM = re.compile(r"^\s*([*+-]|\d+\.|\w\))\s+")
# A run of text followed by its terminators, or a trailing run without one
_SENTENCE = re.compile(r"[^.!?]+[.!?]*|[.!?]+")

BLOCK_SEPARATOR = "\n\n"
UNIT_SEPARATOR = "\n"


def is_list_item(line: str) -> bool:
    """Check whether a line starts a list item."""
    return _LIST_ITEM.match(line) is not None


def get_semantic_blocks(text: str) -> list[str]:
    """Group the lines of text into paragraph and list blocks.

    A blank line always ends the current block, and so does a change between
    list lines and plain text lines. An indented line without a list marker
    that follows a list line continues that list item and stays in the list
    block.

    Args:
        text: Document text

    Returns:
        list[str]: Trimmed, non-empty blocks in document order
    """
    blocks: list[str] = []
    current_lines: list[str] = []
    current_is_list = False

    for line in text.split("\n"):
        if not line.strip():
            if current_lines:
                blocks.append("\n".join(current_lines).strip())
                current_lines = []
            continue

        line_is_list = is_list_item(line)
        if current_is_list and current_lines and not line_is_list and line[:1].isspace():
            # Indented continuation of the previous list item
            current_lines.append(line)
            continue

        if current_lines and line_is_list != current_is_list:
            blocks.append("\n".join(current_lines).strip())
            current_lines = []

        if not current_lines:
            current_is_list = line_is_list
        current_lines.append(line)

    if current_lines:
        blocks.append("\n".join(current_lines).strip())

    return [block for block in blocks if block]


def split_list_items(block: str) -> list[str]:
    """Split a list block into items, keeping continuation lines with their item."""
    items: list[str] = []
    current_item = ""

    for line in block.split("\n"):
        if is_list_item(line) and current_item:
            items.append(current_item.strip())
            current_item = line
        else:
            current_item = f"{current_item}\n{line}" if current_item else line

    if current_item:
        items.append(current_item.strip())
    return items


def split_sentences(block: str) -> list[str]:
    """Split a text block into sentences."""
    return _SENTENCE.findall(block) or [block]


def _pack(units: list[str], max_chunk_size: int, separator: str) -> list[str]:
    """Greedily pack units into chunks of at most max_chunk_size characters.

    Units larger than max_chunk_size become chunks of their own.
    """
    chunks: list[str] = []
    current = ""

    for unit in units:
        unit = unit.strip()
        if not unit:
            continue

        if len(unit) > max_chunk_size:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(unit)
            continue

        candidate = f"{current}{separator}{unit}" if current else unit
        if len(candidate) > max_chunk_size:
            chunks.append(current)
            current = unit
        else:
            current = candidate

    if current:
        chunks.append(current)
    return chunks


def _split_oversized_block(block: str, max_chunk_size: int) -> list[str]:
    first_line = block.split("\n", 1)[0]
    if is_list_item(first_line):
        units = split_list_items(block)
    else:
        units = split_sentences(block)
    return _pack(units, max_chunk_size, UNIT_SEPARATOR)


def chunk_text(text: str | None, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> list[str]:
    """Split a document into semantically coherent chunks.

    Paragraphs and lists are kept together where they fit; adjacent blocks
    are joined with a blank line until max_chunk_size would be exceeded.

    Args:
        text: The full document text
        max_chunk_size: Target maximum size of each chunk, in characters

    Returns:
        list[str]: Trimmed, non-empty chunks in document order
    """
    if not text or not text.strip():
        return []

    chunks: list[str] = []
    current = ""

    for block in get_semantic_blocks(text):
        if len(block) > max_chunk_size:
            if current:
                chunks.append(current)
                current = ""
            chunks.extend(_split_oversized_block(block, max_chunk_size))
            continue

        candidate = f"{current}{BLOCK_SEPARATOR}{block}" if current else block
        if len(candidate) > max_chunk_size:
            chunks.append(current)
            current = block
        else:
            current = candidate

    if current:
        chunks.append(current)

    chunks = [chunk.strip() for chunk in chunks if chunk.strip()]
    logger.debug(f"Split {len(text)} characters into {len(chunks)} chunks")
    return chunks
