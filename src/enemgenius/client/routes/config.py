"""Services and limits shared by the blueprints."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from enemgenius.constants import (
    ALLOWED_EXTENSIONS,
    DEFAULT_MAX_CHUNK_SIZE,
    DEFAULT_MAX_CONTEXT_LENGTH,
)


@dataclass
class RouteConfig:
    """What the route handlers depend on.

    Attributes:
        llm_service: LLMService used for generation and explanations
        store: Initialized KnowledgeStore
        local_mcp_server_url: Knowledge base MCP server checked by /api/mcp-status
        upload_folder: Where uploads wait while they are parsed
        allowed_extensions: Lower-case upload extensions without the dot
        max_chunk_size: Maximum characters per chunk at ingestion
        max_context_length: Character budget of the generation context
    """

    llm_service: Any = None
    store: Any = None
    local_mcp_server_url: str | None = None
    upload_folder: Path | None = None
    allowed_extensions: set[str] = field(default_factory=lambda: set(ALLOWED_EXTENSIONS))
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    max_context_length: int = DEFAULT_MAX_CONTEXT_LENGTH


_config = RouteConfig()
_FIELD_NAMES = frozenset(f.name for f in fields(RouteConfig))


def get_config() -> RouteConfig:
    return _config


def init_config(**settings: Any) -> RouteConfig:
    """Update the shared configuration; settings passed as None are ignored.

    Raises:
        TypeError: For a name that is not a RouteConfig field
    """
    unknown = set(settings) - _FIELD_NAMES
    if unknown:
        raise TypeError(f"Unknown route settings: {', '.join(sorted(unknown))}")

    for name, value in settings.items():
        if value is not None:
            setattr(_config, name, value)
    return _config
