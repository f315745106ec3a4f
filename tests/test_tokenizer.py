"""Tests for Portuguese tokenization."""

from enemgenius.rag.tokenizer import (
    NORMALIZED_STOP_WORDS,
    PORTUGUESE_STOP_WORDS,
    normalize,
    tokenize,
)


class TestNormalize:
    """Tests for the normalize function."""

    def test_lowercases_and_strips_accents(self):
        assert normalize("Revolução Ação ÊXITO") == "revolucao acao exito"

    def test_strips_punctuation_without_inserting_spaces(self):
        assert normalize("guarda-chuva, (teste)!") == "guardachuva teste"

    def test_keeps_digits_and_underscores(self):
        assert normalize("ano_1789") == "ano_1789"


class TestTokenize:
    """Tests for the tokenize function."""

    def test_none_and_empty_yield_no_terms(self):
        assert tokenize(None) == []
        assert tokenize("") == []
        assert tokenize("   \n\t ") == []

    def test_drops_stop_words_and_short_tokens(self):
        assert tokenize("O gato e o cachorro. O gato corre.") == [
            "gato",
            "cachorro",
            "gato",
            "corre",
        ]

    def test_keeps_order_and_duplicates(self):
        assert tokenize("química física química") == ["quimica", "fisica", "quimica"]

    def test_three_letter_tokens_are_kept(self):
        assert tokenize("sol lua eu") == ["sol", "lua"]

    def test_accented_and_plain_forms_match(self):
        assert tokenize("Revolução") == tokenize("revolucao") == ["revolucao"]

    def test_accented_stop_words_are_removed(self):
        """Stop words are compared after accent stripping, so 'não' and 'também' go away."""
        assert tokenize("não também você está fotossíntese") == ["fotossintese"]

    def test_numbers_are_terms(self):
        assert tokenize("Em 1789, a Bastilha caiu") == ["1789", "bastilha", "caiu"]

    def test_is_deterministic(self):
        text = "A urbanização acelerou a industrialização brasileira."
        assert tokenize(text) == tokenize(text)


class TestStopWords:
    """Tests for the stop-word sets."""

    def test_stop_word_set_covers_common_forms(self):
        for word in ("de", "que", "não", "estávamos", "houvéssemos", "teríamos"):
            assert word in PORTUGUESE_STOP_WORDS

    def test_normalized_set_is_accent_free(self):
        assert "nao" in NORMALIZED_STOP_WORDS
        assert "estavamos" in NORMALIZED_STOP_WORDS
        assert all(word == normalize(word) for word in NORMALIZED_STOP_WORDS)
