"""
API v1 Blueprint.

This blueprint provides the map client's JSON endpoints under /api/v1/*.
The web interface also mounts it at the root so /points, /images and
/upload-url keep working for existing clients.
"""

from flask import Blueprint, jsonify, request

from logging_config import get_logger
from web.services import points_service, upload_service
from web.services.points_service import StoreError
from web.services.upload_service import UploadUnavailableError

logger = get_logger(__name__)

# Create Blueprint
api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@api_v1.after_request
def _add_cors_headers(response):
    for header, value in CORS_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


@api_v1.route("/points", methods=["GET"])
@api_v1.route("/images", methods=["GET"])
def list_points():
    """Returns every indexed image point."""
    try:
        points = points_service.list_points()
    except StoreError as e:
        logger.error(f"Listing points failed: {e}")
        return jsonify({"error": str(e)}), 500
    return jsonify(points)


@api_v1.route("/upload-url", methods=["POST"])
def upload_url():
    """Issues a presigned upload URL for {"filename": ...}."""
    payload = request.get_json(silent=True) or {}
    filename = payload.get("filename", "")
    if not isinstance(filename, str):
        return jsonify({"error": "filename must be a string"}), 400

    try:
        result = upload_service.create_upload_url(filename)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except UploadUnavailableError as e:
        return jsonify({"error": str(e)}), 503
    return jsonify(result)
