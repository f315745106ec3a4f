"""Exam API routes."""

import logging

from flask import Blueprint, jsonify, request

from enemgenius.client.routes.config import get_config
from enemgenius.service.exams import create_exam, resolve_exam_questions

logger = logging.getLogger(__name__)

exams_bp = Blueprint("exams", __name__)


@exams_bp.route("/api/exams", methods=["GET"])
def list_exams():
    try:
        exams = get_config().store.get_exams()
        return jsonify({"exams": [exam.to_dict() for exam in exams]})
    except Exception as e:
        logger.error(f"❌ Error listing exams: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@exams_bp.route("/api/exams", methods=["POST"])
def create():
    """Create an exam from stored questions.

    Request:
        {
            "name": "Simulado 1",
            "questionIds": ["...", "..."],
            "includeOptions": true,  # Optional
            "includeAnswerKey": false  # Optional
        }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Missing JSON body"}), 400

    question_ids = data.get("questionIds") or []
    if not isinstance(question_ids, list):
        return jsonify({"error": "'questionIds' must be a list"}), 400

    try:
        exam = create_exam(
            data.get("name") or "",
            question_ids,
            include_options=bool(data.get("includeOptions", True)),
            include_answer_key=bool(data.get("includeAnswerKey", False)),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        get_config().store.save_exam(exam)
        logger.info(f"📝 Created exam '{exam.name}' with {len(exam.question_ids)} question(s)")
        return jsonify({"exam": exam.to_dict()}), 201
    except Exception as e:
        logger.error(f"❌ Error saving exam: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@exams_bp.route("/api/exams/<exam_id>", methods=["DELETE"])
def delete(exam_id: str):
    try:
        get_config().store.delete_exam(exam_id)
        return jsonify({"success": True})
    except Exception as e:
        logger.error(f"❌ Error deleting exam {exam_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@exams_bp.route("/api/exams/<exam_id>/questions", methods=["GET"])
def exam_questions(exam_id: str):
    """Return the questions of an exam in exam order."""
    store = get_config().store
    try:
        exam = next((e for e in store.get_exams() if e.id == exam_id), None)
        if exam is None:
            return jsonify({"error": f"Exam not found: {exam_id}"}), 404

        questions = resolve_exam_questions(exam, store.get_questions())
        return jsonify(
            {
                "exam": exam.to_dict(),
                "questions": [question.to_dict() for question in questions],
            }
        )
    except Exception as e:
        logger.error(f"❌ Error resolving exam {exam_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500
