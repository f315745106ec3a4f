"""Liveness and MCP connectivity endpoints."""

import logging

from flask import Blueprint, jsonify

from enemgenius.client.routes.config import get_config
from enemgenius.service.mcp_helpers import check_mcp_server, run_async

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__)

DEFAULT_MCP_SERVER_NAME = "Knowledge Base Server"


def _state(component) -> str:
    return "initialized" if component else "not initialized"


@health_bp.route("/health", methods=["GET"])
def health():
    """Report whether the LLM service and the knowledge store are set up.

    When the store is reachable, the number of stored and selected knowledge
    files is included.
    """
    config = get_config()
    body = {
        "status": "healthy",
        "llm_service": _state(config.llm_service),
        "store": _state(config.store),
    }

    if config.store:
        try:
            files = config.store.get_all_files_meta()
            body["knowledge_files"] = {
                "total": len(files),
                "selected": sum(1 for file in files if file.is_selected),
            }
        except Exception as e:
            logger.warning(f"⚠️ Knowledge store unavailable: {e}")
            body["store"] = "unavailable"

    return jsonify(body)


@health_bp.route("/api/mcp-status", methods=["GET"])
def get_mcp_status():
    """Check the configured knowledge base MCP server."""
    config = get_config()
    url = config.local_mcp_server_url
    if not url:
        return jsonify({"connected": [], "failed": [], "total_configured": 0})

    logger.info(f"🔌 Checking MCP server at {url}...")
    result = run_async(check_mcp_server(url))
    result["name"] = result.get("server_name") or DEFAULT_MCP_SERVER_NAME
    connected = result["status"] == "connected"
    logger.info(f"{'✅' if connected else '❌'} MCP server {result['name']}: {result['status']}")

    return jsonify(
        {
            "connected": [result] if connected else [],
            "failed": [] if connected else [result],
            "total_configured": 1,
        }
    )
