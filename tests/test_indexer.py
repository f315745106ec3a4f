"""Tests for term-frequency indexing and chunk models."""

import pytest

from enemgenius.rag.indexer import compute_term_frequencies, index_chunks
from enemgenius.rag.models import IndexedChunk


class TestComputeTermFrequencies:
    """Tests for compute_term_frequencies."""

    def test_counts_terms_excluding_stop_words(self):
        tf = compute_term_frequencies("O gato e o cachorro. O gato corre.")
        assert tf == {"gato": 2, "cachorro": 1, "corre": 1}

    def test_empty_text_yields_empty_map(self):
        assert compute_term_frequencies("") == {}
        assert compute_term_frequencies(None) == {}

    def test_accent_variants_share_a_key(self):
        tf = compute_term_frequencies("Revolução e revolucao")
        assert tf == {"revolucao": 2}


class TestIndexChunks:
    """Tests for index_chunks."""

    def test_preserves_order_and_text(self):
        texts = ["Primeiro trecho sobre clima.", "Segundo trecho sobre relevo."]
        chunks = index_chunks(texts)

        assert [chunk.text for chunk in chunks] == texts
        assert chunks[0].tf_index["clima"] == 1
        assert "clima" not in chunks[1].tf_index

    def test_empty_input(self):
        assert index_chunks([]) == []


class TestIndexedChunk:
    """Tests for the IndexedChunk model."""

    def test_to_dict_uses_storage_keys(self):
        chunk = IndexedChunk(text="Texto", tf_index={"texto": 1})
        assert chunk.to_dict() == {"text": "Texto", "tfIndex": {"texto": 1}}

    def test_from_dict_accepts_both_key_styles(self):
        camel = IndexedChunk.from_dict({"text": "a", "tfIndex": {"abc": 2}})
        snake = IndexedChunk.from_dict({"text": "a", "tf_index": {"abc": 2}})
        assert camel == snake == IndexedChunk(text="a", tf_index={"abc": 2})

    def test_is_immutable(self):
        chunk = IndexedChunk(text="Texto")
        with pytest.raises(AttributeError):
            chunk.text = "Outro"
