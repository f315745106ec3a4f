"""Lightweight local retrieval for ENEM Genius.

This package selects relevant passages from uploaded documents before they
are injected into question-generation prompts:
- tokenize: Portuguese-aware normalization and stop-word filtering
- chunk_text: paragraph, list and sentence aware chunking
- compute_term_frequencies / index_chunks: ingestion-time indexing
- select_context: term-frequency ranking under a character budget

Usage:
    from enemgenius.rag import chunk_text, index_chunks, select_context

    chunks = index_chunks(chunk_text(document_text))
    context = select_context("revolução industrial", chunks, max_context_length=12000)
"""

from enemgenius.rag.chunking import chunk_text, get_semantic_blocks, is_list_item
from enemgenius.rag.indexer import compute_term_frequencies, index_chunks
from enemgenius.rag.models import IndexedChunk, ScoredChunk
from enemgenius.rag.retrieval import score_chunks, select_context
from enemgenius.rag.tokenizer import PORTUGUESE_STOP_WORDS, tokenize

__all__ = [
    "IndexedChunk",
    "ScoredChunk",
    "PORTUGUESE_STOP_WORDS",
    "tokenize",
    "chunk_text",
    "get_semantic_blocks",
    "is_list_item",
    "compute_term_frequencies",
    "index_chunks",
    "score_chunks",
    "select_context",
]
