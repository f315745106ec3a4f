"""Knowledge file API routes: upload, selection and context preview."""

import logging

from flask import Blueprint, jsonify, request
from werkzeug.utils import secure_filename

from enemgenius.client.ingest import UnsupportedFileTypeError, build_knowledge_file, file_extension
from enemgenius.client.routes.config import get_config
from enemgenius.models import new_id
from enemgenius.service.question_generator import GenerationRequest, retrieve_generation_context

logger = logging.getLogger(__name__)

knowledge_bp = Blueprint("knowledge", __name__)


def allowed_file(filename: str) -> bool:
    """Check if the file extension is allowed.

    Args:
        filename: The filename to check

    Returns:
        True if extension is allowed, False otherwise
    """
    return file_extension(filename) in get_config().allowed_extensions


@knowledge_bp.route("/api/knowledge-files", methods=["GET"])
def list_knowledge_files():
    """List the metadata of every knowledge file."""
    config = get_config()
    try:
        files = config.store.get_all_files_meta()
        return jsonify({"files": [file.to_dict() for file in files]})
    except Exception as e:
        logger.error(f"❌ Error listing knowledge files: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@knowledge_bp.route("/api/knowledge-files", methods=["POST"])
def upload_knowledge_files():
    """Handle document upload, indexing and storage.

    Expects multipart form data with:
        - files: One or more .pdf, .docx, .txt or .md files
        - selected: Optional "true" to select the new files for retrieval

    A file appears in listings only after its chunks are fully stored.

    Returns:
        JSON response with per-file status
    """
    config = get_config()
    logger.info("📤 Received knowledge file upload request")

    if "files" not in request.files:
        logger.warning("❌ No files in request")
        return jsonify({"error": "No files provided"}), 400

    files = request.files.getlist("files")
    if not files or all(f.filename == "" for f in files):
        logger.warning("❌ No files selected")
        return jsonify({"error": "No files selected"}), 400

    selected = request.form.get("selected", "false").lower() == "true"
    results = []
    success_count = 0

    for file in files:
        if file.filename == "":
            continue

        if not allowed_file(file.filename):
            results.append(
                {
                    "filename": file.filename,
                    "status": "error",
                    "error": "File type not allowed. Accepted: "
                    + ", ".join(sorted(config.allowed_extensions)),
                }
            )
            continue

        # Unique per upload; secure_filename can return an empty string
        filepath = config.upload_folder / f"{new_id()}_{secure_filename(file.filename)}"
        try:
            file.save(filepath)
            logger.info(f"💾 Saved file: {filepath}")

            knowledge_file = build_knowledge_file(
                filepath,
                max_chunk_size=config.max_chunk_size,
                selected=selected,
                name=file.filename,
            )
            config.store.save_file(knowledge_file)
            results.append(
                {
                    "filename": file.filename,
                    "status": "success",
                    "file": knowledge_file.meta().to_dict(),
                    "chunks": len(knowledge_file.indexed_chunks),
                }
            )
            success_count += 1
        except UnsupportedFileTypeError as e:
            results.append({"filename": file.filename, "status": "error", "error": str(e)})
        except Exception as e:
            logger.error(f"❌ Error processing {file.filename}: {e}", exc_info=True)
            results.append({"filename": file.filename, "status": "error", "error": str(e)})
        finally:
            if filepath.exists():
                filepath.unlink()

    return jsonify(
        {
            "success": success_count > 0,
            "message": f"Successfully ingested {success_count} of {len(files)} documents",
            "details": results,
        }
    )


@knowledge_bp.route("/api/knowledge-files/<file_id>", methods=["PATCH"])
def update_knowledge_file(file_id: str):
    """Select or deselect a knowledge file for retrieval.

    Request:
        {"isSelected": true}
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data.get("isSelected"), bool):
        return jsonify({"error": "Missing boolean 'isSelected' field in request"}), 400

    try:
        if not get_config().store.set_file_selected(file_id, data["isSelected"]):
            return jsonify({"error": f"Knowledge file not found: {file_id}"}), 404
        return jsonify({"id": file_id, "isSelected": data["isSelected"]})
    except Exception as e:
        logger.error(f"❌ Error updating knowledge file {file_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@knowledge_bp.route("/api/knowledge-files/<file_id>", methods=["DELETE"])
def delete_knowledge_file(file_id: str):
    """Delete a knowledge file and its chunks."""
    try:
        get_config().store.delete_file(file_id)
        return jsonify({"success": True})
    except Exception as e:
        logger.error(f"❌ Error deleting knowledge file {file_id}: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500


@knowledge_bp.route("/api/context-preview", methods=["POST"])
def preview_context():
    """Show the context that would be injected for the given topics.

    Request:
        {
            "topics": "revolução industrial, urbanização",
            "discipline": "História",  # Optional, used when topics are blank
            "maxContextLength": 4000  # Optional
        }
    """
    config = get_config()
    data = request.get_json(silent=True) or {}
    generation_request = GenerationRequest(
        topics=data.get("topics") or "",
        discipline=data.get("discipline") or GenerationRequest.discipline,
    )
    max_context_length = data.get("maxContextLength", config.max_context_length)
    if isinstance(max_context_length, bool) or not isinstance(max_context_length, int):
        return jsonify({"error": "'maxContextLength' must be an integer"}), 400

    try:
        context = retrieve_generation_context(config.store, generation_request, max_context_length)
        return jsonify(
            {
                "query": generation_request.retrieval_query,
                "context": context,
                "length": len(context),
            }
        )
    except Exception as e:
        logger.error(f"❌ Error building context preview: {e}", exc_info=True)
        return jsonify({"error": f"Internal server error: {str(e)}"}), 500
