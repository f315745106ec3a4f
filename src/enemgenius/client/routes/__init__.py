"""Flask route blueprints for the ENEM Genius web application."""

from enemgenius.client.routes.config import get_config, init_config
from enemgenius.client.routes.exams import exams_bp
from enemgenius.client.routes.health import health_bp
from enemgenius.client.routes.knowledge import knowledge_bp
from enemgenius.client.routes.questions import questions_bp

__all__ = [
    "exams_bp",
    "health_bp",
    "knowledge_bp",
    "questions_bp",
    "init_config",
    "get_config",
]
