"""Flask web application for ENEM question authoring.

REST API to upload course materials into the knowledge base, choose which of
them feed retrieval, generate ENEM questions grounded on them, and assemble
exams. Retrieval runs locally on the term-frequency index; only generation
and explanations call the LLM service.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from enemgenius.client.routes import (
    exams_bp,
    health_bp,
    init_config,
    knowledge_bp,
    questions_bp,
)
from enemgenius.constants import (
    DEFAULT_LOCAL_MCP_URL,
    MAX_UPLOAD_SIZE_BYTES,
    get_max_chunk_size,
    get_max_context_length,
)
from enemgenius.llm import get_llm_service
from enemgenius.service.database import KnowledgeStore

logging.basicConfig(
    level=getattr(logging, os.getenv("LOG_LEVEL", "INFO")),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

load_dotenv()

BLUEPRINTS = (knowledge_bp, questions_bp, exams_bp, health_bp)
UPLOAD_FOLDER = Path(os.getenv("UPLOAD_FOLDER", "/tmp/enemgenius_uploads"))

app = Flask(__name__)
# Uploads are parsed and deleted right away; the folder only holds files in flight
app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_SIZE_BYTES
UPLOAD_FOLDER.mkdir(parents=True, exist_ok=True)
for blueprint in BLUEPRINTS:
    app.register_blueprint(blueprint)


def initialize_services() -> None:
    """Connect the LLM service and the knowledge store and publish them to the routes."""
    logger.info("🔧 Initializing services...")

    llm_service = get_llm_service()
    store = KnowledgeStore().init()
    logger.info(f"✅ Knowledge store connected to database '{store.database}'")

    mcp_url = os.getenv("LOCAL_MCP_SERVER_URL", DEFAULT_LOCAL_MCP_URL)
    max_chunk_size = get_max_chunk_size()
    max_context_length = get_max_context_length()
    logger.info(
        f"📐 Chunks up to {max_chunk_size} chars, context up to {max_context_length} chars, "
        f"MCP server at {mcp_url}"
    )

    init_config(
        llm_service=llm_service,
        store=store,
        local_mcp_server_url=mcp_url,
        upload_folder=UPLOAD_FOLDER,
        max_chunk_size=max_chunk_size,
        max_context_length=max_context_length,
    )


def create_app() -> Flask:
    """WSGI entry point (e.g. for gunicorn): initialize services, return the app."""
    initialize_services()
    return app


def main() -> None:
    """Run the development server (FLASK_HOST, FLASK_PORT, FLASK_ENV)."""
    host = os.getenv("FLASK_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_PORT", "5000"))
    debug = os.getenv("FLASK_ENV", "development") == "development"

    print("🚀 Starting ENEM Genius...")
    initialize_services()
    print(f"🌐 Serving on http://{host}:{port} (debug={debug}), press CTRL+C to quit")

    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
