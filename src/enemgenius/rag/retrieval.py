"""Term-frequency relevance scoring and prompt context assembly."""

import logging
from collections.abc import Sequence

from enemgenius.constants import CONTEXT_SEPARATOR, DEFAULT_FALLBACK_CHUNK_COUNT
from enemgenius.rag.models import IndexedChunk, ScoredChunk
from enemgenius.rag.tokenizer import tokenize

logger = logging.getLogger(__name__)


def score_chunks(query_terms: Sequence[str], chunks: Sequence[IndexedChunk]) -> list[ScoredChunk]:
    """Rank chunks by the summed frequency of the query terms they contain.

    Chunks scoring zero are discarded. Chunks with equal scores keep their
    relative order from the input sequence.

    Args:
        query_terms: Tokenized query (duplicates count once per occurrence)
        chunks: Indexed chunks in ingestion order

    Returns:
        list[ScoredChunk]: Matching chunks, highest score first
    """
    scored = []
    for position, chunk in enumerate(chunks):
        score = sum(chunk.tf_index.get(term, 0) for term in query_terms)
        if score > 0:
            scored.append(ScoredChunk(text=chunk.text, score=score, position=position))

    # sorted() is stable, so ties stay in ingestion order
    return sorted(scored, key=lambda item: item.score, reverse=True)


def select_context(
    query: str | None,
    chunks: Sequence[IndexedChunk],
    max_context_length: int,
    fallback_count: int = DEFAULT_FALLBACK_CHUNK_COUNT,
    separator: str = CONTEXT_SEPARATOR,
) -> str:
    """Assemble the most relevant chunk texts for a query within a character budget.

    Chunks are added whole in ranked order, stopping before the first chunk
    that would take the result (separators included) past max_context_length.
    When no chunk contains any query term, the first fallback_count chunks
    are returned in their original order without a budget check.

    Args:
        query: Topic string to retrieve context for
        chunks: Indexed chunks of the selected documents, in ingestion order
        max_context_length: Maximum length of the returned context
        fallback_count: Number of chunks to use when nothing matches
        separator: Text placed between chunks

    Returns:
        str: The assembled context, or "" when there are no chunks or no query terms
    """
    if not chunks:
        return ""

    query_terms = tokenize(query)
    if not query_terms:
        return ""

    ranked = score_chunks(query_terms, chunks)
    if not ranked:
        logger.info(
            f"No chunk matched {len(query_terms)} query terms; "
            f"falling back to the first {fallback_count} chunks"
        )
        return separator.join(chunk.text for chunk in chunks[:fallback_count])

    selected: list[str] = []
    length = 0
    for item in ranked:
        added = len(item.text) + (len(separator) if selected else 0)
        if length + added > max_context_length:
            break
        selected.append(item.text)
        length += added

    logger.debug(
        f"Selected {len(selected)} of {len(ranked)} matching chunks ({length} characters)"
    )
    return separator.join(selected)
