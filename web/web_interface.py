# ------------------------------------------------------------------------------
# web_interface.py
# ------------------------------------------------------------------------------

from flask import Flask, render_template

from logging_config import get_logger
from web.blueprints.api_v1 import api_v1

logger = get_logger(__name__)


def create_web_interface():
    """
    Creates and returns the web interface (Flask server) for the image map.

    Routes:
      - GET  /                 Map page (Leaflet) that plots /points
      - GET  /points, /images  Indexed image points as JSON
      - POST /upload-url       Presigned upload URL for a new image
      - The same JSON routes under /api/v1/*
    """
    server = Flask(__name__)

    server.register_blueprint(api_v1)
    # Unversioned paths used by the map page and older clients.
    server.register_blueprint(api_v1, url_prefix="", name="api")

    @server.route("/")
    def index():
        return render_template("index.html")

    # -----------------------------
    # Function to Start the Web Interface
    # -----------------------------
    def run(debug=False, host="0.0.0.0", port=8050):
        logger.info(f"Starting Flask server on http://{host}:{port}")
        server.run(host=host, port=port, debug=debug)

    return {"server": server, "run": run}
