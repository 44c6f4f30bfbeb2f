from flask import Blueprint, jsonify

from .lookups import get_catalog

bp = Blueprint("health", __name__)


@bp.get("/health")
def health():
    """
    Health check
    ---
    tags:
      - Health
    responses:
      200:
        description: Service is up; reports the storage engine and the last save error, if any
    """
    catalog = get_catalog()
    last_error = catalog.last_save_error
    return jsonify({
        "status": "ok" if last_error is None else "degraded",
        "storage": str(catalog.storage),
        "last_save_error": str(last_error) if last_error else None,
    }), 200
