"""Term-frequency indexing of chunk text."""

from collections import Counter
from collections.abc import Iterable

from enemgenius.rag.models import IndexedChunk
from enemgenius.rag.tokenizer import tokenize


def compute_term_frequencies(text: str | None) -> dict[str, int]:
    """Count the occurrences of each normalized term in text.

    Args:
        text: Chunk text

    Returns:
        dict[str, int]: Term to occurrence count
    """
    return dict(Counter(tokenize(text)))


def index_chunks(texts: Iterable[str]) -> list[IndexedChunk]:
    """Pair each chunk text with its term-frequency map.

    Args:
        texts: Chunk texts in document order

    Returns:
        list[IndexedChunk]: Indexed chunks in the same order
    """
    return [IndexedChunk(text=text, tf_index=compute_term_frequencies(text)) for text in texts]
