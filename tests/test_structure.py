"""Tests for the enemgenius package structure."""


def test_package_imports():
    """Test that main package can be imported."""
    import enemgenius
    assert enemgenius.__version__ == "0.1.0"


def test_rag_subpackage_exports_pipeline():
    """Test that the retrieval pipeline is importable from one place."""
    from enemgenius.rag import chunk_text, index_chunks, select_context, tokenize

    assert all(callable(f) for f in (chunk_text, index_chunks, select_context, tokenize))


def test_service_and_client_subpackages():
    """Test that service and client subpackages exist."""
    import enemgenius.client
    import enemgenius.llm
    import enemgenius.service

    assert enemgenius.service is not None
    assert enemgenius.client is not None
    assert enemgenius.llm is not None
