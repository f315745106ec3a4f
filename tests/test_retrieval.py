"""Tests for relevance scoring and context assembly."""

from enemgenius.rag.indexer import index_chunks
from enemgenius.rag.models import IndexedChunk
from enemgenius.rag.retrieval import score_chunks, select_context


def make_chunks(*texts: str) -> list[IndexedChunk]:
    return index_chunks(texts)


class TestScoreChunks:
    """Tests for score_chunks."""

    def test_ranks_by_summed_term_frequency(self):
        chunks = make_chunks("clima clima relevo", "clima", "relevo relevo relevo")
        ranked = score_chunks(["clima", "relevo"], chunks)

        assert [(item.position, item.score) for item in ranked] == [(0, 3), (2, 3), (1, 1)]

    def test_discards_chunks_without_query_terms(self):
        chunks = make_chunks("fotossíntese nas plantas", "mitose celular")
        ranked = score_chunks(["fotossintese"], chunks)

        assert len(ranked) == 1
        assert ranked[0].text == "fotossíntese nas plantas"

    def test_ties_keep_ingestion_order(self):
        chunks = make_chunks("Brasil colônia", "Brasil império", "Brasil república")
        ranked = score_chunks(["brasil"], chunks)

        assert [item.position for item in ranked] == [0, 1, 2]

    def test_repeated_query_terms_count_each_time(self):
        chunks = make_chunks("energia solar", "energia eólica eólica")
        ranked = score_chunks(["solar", "solar", "solar", "eolica"], chunks)

        assert [(item.position, item.score) for item in ranked] == [(0, 3), (1, 2)]


class TestSelectContext:
    """Tests for select_context."""

    def test_no_chunks_yields_empty_context(self):
        assert select_context("revolução industrial", [], 1000) == ""

    def test_query_without_terms_yields_empty_context(self):
        chunks = make_chunks("Texto sobre a revolução industrial.")
        assert select_context("de o a", chunks, 1000) == ""
        assert select_context("", chunks, 1000) == ""
        assert select_context(None, chunks, 1000) == ""

    def test_best_matching_chunk_comes_first(self):
        chunks = make_chunks(
            "Um texto sobre geografia física.",
            "Revolução, revolução e mais revolução na França.",
        )
        context = select_context("revolução", chunks, 1000)

        assert context == "Revolução, revolução e mais revolução na França."

    def test_accents_do_not_affect_matching(self):
        chunks = make_chunks("A Revolução Industrial mudou o trabalho.")
        assert select_context("revolucao", chunks, 1000) == chunks[0].text

    def test_falls_back_to_first_chunks_when_nothing_matches(self):
        chunks = make_chunks(*[f"Trecho número {i} sobre biologia." for i in range(7)])
        context = select_context("astronomia", chunks, 10)

        assert context == "\n\n".join(chunk.text for chunk in chunks[:5])

    def test_fallback_count_is_configurable(self):
        chunks = make_chunks("primeiro trecho", "segundo trecho", "terceiro trecho")
        context = select_context("astronomia", chunks, 1000, fallback_count=2)

        assert context == "primeiro trecho\n\nsegundo trecho"

    def test_budget_counts_separators(self):
        chunks = make_chunks("planeta aa", "planeta bb", "planeta cc")

        assert select_context("planeta", chunks, 22) == "planeta aa\n\nplaneta bb"
        assert select_context("planeta", chunks, 21) == "planeta aa"

    def test_stops_at_first_chunk_that_does_not_fit(self):
        chunks = make_chunks(
            "estrela estrela estrela com um texto bem comprido",
            "estrela curta",
        )
        assert select_context("estrela", chunks, 20) == ""

    def test_scored_output_respects_budget(self, history_text):
        from enemgenius.rag.chunking import chunk_text

        chunks = index_chunks(chunk_text(history_text * 5, max_chunk_size=60))
        context = select_context("revolução fábricas ferrovias", chunks, 150)

        assert 0 < len(context) <= 150

    def test_custom_separator(self):
        chunks = make_chunks("oceano atlântico", "oceano pacífico")
        context = select_context("oceano", chunks, 1000, separator="\n---\n")

        assert context == "oceano atlântico\n---\noceano pacífico"

    def test_is_deterministic(self):
        chunks = make_chunks("célula animal", "célula vegetal", "tecido")
        first = select_context("célula", chunks, 1000)
        assert all(select_context("célula", chunks, 1000) == first for _ in range(5))
