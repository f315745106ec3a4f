"""Question API routes: generation, listing, editing and explanations."""

import logging

from flask import Blueprint, jsonify, request

from enemgenius.client.routes.config import get_config
from enemgenius.models import Question
from enemgenius.service.mcp_helpers import run_async
from enemgenius.service.question_generator import (
    GenerationRequest,
    QuestionGenerationError,
    RateLimitedError,
    explain_question,
    generate_questions,
    retrieve_generation_context,
    validate_question_fields,
)

logger = logging.getLogger(__name__)

questions_bp = Blueprint("questions", __name__)

EDITABLE_FIELDS = ("stem", "options", "answerIndex", "expectedAnswer", "favorited", "topics")


def filter_questions(
    questions: list[Question],
    discipline: str | None = None,
    question_type: str | None = None,
    favorited: bool | None = None,
    search: str | None = None,
) -> list[Question]:
    """Filter questions by discipline, type, favorite flag and stem text."""
    result = questions
    if discipline:
        result = [q for q in result if q.discipline == discipline]
    if question_type:
        result = [q for q in result if q.type == question_type]
    if favorited is not None:
        result = [q for q in result if q.favorited == favorited]
    if search:
        needle = search.lower()
        result = [q for q in result if needle in q.stem.lower()]
    return result


@questions_bp.route("/api/questions/generate", methods=["POST"])
def generate():
    """Generate ENEM questions grounded on the selected knowledge files.

    Request:
        {
            "numQuestions": 3,
            "questionType": "objective",
            "discipline": "História",
            "schoolYear": "3ª Série do Ensino Médio",
            "difficulty": "Médio",
            "bloomLevel": "Analisar",
            "constructionType": "Interpretação",
            "topics": "revolução industrial",
            "temperature": 0.7
        }

    Response:
        {"questions": [...], "contextLength": 5321}
    """
    config = get_config()
    logger.info("📨 Received question generation request")

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Missing JSON body"}), 400

    try:
        generation_request = GenerationRequest.from_dict(data)
        generation_request.validate()
    except (TypeError, ValueError) as e:
        logger.warning(f"❌ Invalid generation request: {e}")
        return jsonify({"error": str(e)}), 400

    try:
        context = retrieve_generation_context(
            config.store, generation_request, config.max_context_length
        )
        questions = run_async(generate_questions(config.llm_service, generation_request, context))
        config.store.save_questions(questions)
        return jsonify(
            {
                "questions": [question.to_dict() for question in questions],
                "contextLength": len(context),
            }
        )
    except RateLimitedError as e:
        logger.warning(f"⚠️ LLM rate limited: {e}")
        return jsonify({"error": str(e)}), 429
    except QuestionGenerationError as e:
        logger.error(f"❌ Question generation failed: {e}")
        return jsonify({"error": str(e)}), 500
    except Exception as e:
        logger.error(f"❌ Error generating questions: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@questions_bp.route("/api/questions", methods=["GET"])
def list_questions():
    """List stored questions, newest first.

    Query parameters: discipline, type, favorited (true/false), search.
    """
    favorited_arg = request.args.get("favorited")
    favorited = None if favorited_arg is None else favorited_arg.lower() == "true"
    try:
        questions = filter_questions(
            get_config().store.get_questions(),
            discipline=request.args.get("discipline"),
            question_type=request.args.get("type"),
            favorited=favorited,
            search=request.args.get("search"),
        )
        return jsonify({"questions": [question.to_dict() for question in questions]})
    except Exception as e:
        logger.error(f"❌ Error listing questions: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@questions_bp.route("/api/questions/<question_id>", methods=["PUT"])
def update_question(question_id: str):
    """Update the editable fields of a question.

    Only stem, options, answerIndex, expectedAnswer, favorited and topics are
    taken from the body. The edited question must still be valid for its type.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Missing JSON body"}), 400

    try:
        question = get_config().store.get_question(question_id)
        if question is None:
            return jsonify({"error": f"Question not found: {question_id}"}), 404

        merged = question.to_dict()
        merged.update({key: data[key] for key in EDITABLE_FIELDS if key in data})
        try:
            validate_question_fields(merged)
        except ValueError as e:
            logger.warning(f"❌ Invalid edit of question {question_id}: {e}")
            return jsonify({"error": str(e)}), 400

        updated = Question.from_dict(merged)
        get_config().store.save_questions([updated])
        return jsonify({"question": updated.to_dict()})
    except Exception as e:
        logger.error(f"❌ Error updating question {question_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@questions_bp.route("/api/questions/<question_id>", methods=["DELETE"])
def delete_question(question_id: str):
    try:
        get_config().store.delete_question(question_id)
        return jsonify({"success": True})
    except Exception as e:
        logger.error(f"❌ Error deleting question {question_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@questions_bp.route("/api/questions/<question_id>/explain", methods=["POST"])
def explain(question_id: str):
    """Generate a step-by-step explanation of a question."""
    config = get_config()
    try:
        question = config.store.get_question(question_id)
        if question is None:
            return jsonify({"error": f"Question not found: {question_id}"}), 404

        explanation = run_async(explain_question(config.llm_service, question))
        return jsonify({"id": question_id, "explanation": explanation})
    except RateLimitedError as e:
        logger.warning(f"⚠️ LLM rate limited: {e}")
        return jsonify({"error": str(e)}), 429
    except QuestionGenerationError as e:
        logger.error(f"❌ Explanation failed: {e}")
        return jsonify({"error": str(e)}), 500
    except Exception as e:
        logger.error(f"❌ Error explaining question {question_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500
