"""
API Routes for the Transaction Categorizer

Provides REST API endpoints for:
- Category predictions
- Incremental model updates, reset and export
- Model information and health checks
"""

from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, jsonify, request

from txncategorizer.config import get_config
from txncategorizer.core.models import UpdateStatus
from txncategorizer.exceptions import TxnCategorizerError, ValidationError
from txncategorizer.logging_config import get_logger
from txncategorizer.ml.prediction_service import build_service, select_label

logger = get_logger(__name__)

# Create blueprint
api = Blueprint("api", __name__, url_prefix="/api")

# Global service instance (lazy loaded)
_service = None


def get_service():
    """Lazy-build the prediction service."""
    global _service
    if _service is None:
        _service = build_service()
    return _service


def set_service(service) -> None:
    """Install a prebuilt service (used by the app factory and tests)."""
    global _service
    _service = service


def _require_text(data: Optional[Dict[str, Any]], field: str) -> str:
    if not data:
        raise ValidationError("Request body must be JSON")
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {field}", field=field, value=value)
    return value


def _error(e: Exception, status: int) -> Tuple[Any, int]:
    return jsonify({"status": "error", "error": str(e)}), status


# Health & Model Info Endpoints
@api.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    try:
        s = get_service()
        return jsonify({
            "status": "healthy",
            "live": "personalized" if s.is_personalized else "default",
        })
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return jsonify({
            "status": "unhealthy",
            "error": str(e),
        }), 503


@api.route("/model-info", methods=["GET"])
def model_info():
    """Get metadata about the live model."""
    try:
        return jsonify({"status": "success", "model_info": get_service().model_info()})
    except TxnCategorizerError as e:
        logger.error("Model info error: %s", e)
        return _error(e, 500)


# Prediction Endpoints
@api.route("/predict", methods=["POST"])
def predict():
    """Predict the category of a transaction description."""
    try:
        text = _require_text(request.get_json(silent=True), "text")
        s = get_service()
        scores = s.predict_scores(text)
        label = select_label(scores, s.confidence_threshold)
        return jsonify({
            "status": "success",
            "label": label,
            "scores": scores,
        })
    except ValidationError as e:
        return _error(e, 400)
    except TxnCategorizerError as e:
        logger.error("Prediction error: %s", e)
        return _error(e, 500)


# Personalization Endpoints
@api.route("/update", methods=["POST"])
def update():
    """Learn a (text, label) pair and wait for the model swap."""
    try:
        data = request.get_json(silent=True)
        text = _require_text(data, "text")
        label = _require_text(data, "label")

        future = get_service().update(text, label)
        timeout = get_config().classifier.update_timeout
        try:
            result = future.result(timeout=timeout)
        except FutureTimeoutError:
            return jsonify({
                "status": "pending",
                "message": f"Update still running after {timeout:.0f}s",
            }), 202

        code = 200 if result.succeeded or result.status == UpdateStatus.SKIPPED else 500
        return jsonify({
            "status": "success" if code == 200 else "error",
            "result": result.to_dict(),
        }), code
    except ValidationError as e:
        return _error(e, 400)
    except TxnCategorizerError as e:
        logger.error("Update error: %s", e)
        return _error(e, 500)


@api.route("/reset", methods=["POST"])
def reset():
    """Discard the personalized model."""
    try:
        get_service().reset()
        return jsonify({"status": "success", "live": "default"})
    except TxnCategorizerError as e:
        logger.error("Reset error: %s", e)
        return _error(e, 500)


def _export_target(data: Optional[Dict[str, Any]]) -> Path:
    """Resolve the export file inside the configured export directory.

    Callers may only pick a plain file name; paths are rejected.
    """
    data = data or {}
    if "destination" in data:
        raise ValidationError(
            "Export destinations are not accepted, pass a file name instead",
            field="destination",
            value=data["destination"],
        )

    config = get_config()
    filename = data.get("filename") or config.model.export_filename
    if (
        not isinstance(filename, str)
        or filename in (".", "..")
        or "\\" in filename
        or Path(filename).name != filename
    ):
        raise ValidationError("filename must be a plain file name", field="filename", value=filename)

    export_dir = Path(config.model.export_dir)
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir / filename


@api.route("/export", methods=["POST"])
def export():
    """Copy the active model artifact into the export directory."""
    try:
        target = _export_target(request.get_json(silent=True))
        result = get_service().export(target)
    except ValidationError as e:
        return _error(e, 400)
    except (TxnCategorizerError, OSError) as e:
        logger.error("Export error: %s", e)
        return _error(e, 500)

    if not result.success:
        return jsonify({"status": "error", "error": result.reason}), 500
    return jsonify({"status": "success", "path": result.path})


def register_routes(app):
    """Register all API routes with the Flask app.

    Args:
        app: Flask application instance.
    """
    app.register_blueprint(api)
    logger.info("Registered API routes")
