"""User-facing entry points: CLI, web API and document ingestion."""
