# ------------------------------------------------------------------------------
# Main Script for the Image Map Web Interface
# main.py
# ------------------------------------------------------------------------------
from config import load_config
config = load_config()
from logging_config import get_logger
logger = get_logger(__name__)

# --------------------------------------------------------------------------
# Configuration Parameters
# --------------------------------------------------------------------------
_debug = config["DEBUG_MODE"]

logger.info(f"Debug mode is {'enabled' if _debug else 'disabled'}.")
logger.info(
    f"Backends: objects={config['OBJECT_STORE_BACKEND']}, "
    f"records={config['RECORD_STORE_BACKEND']}"
)

# -----------------------------
# Import and Run the Web Interface
# -----------------------------
from web.web_interface import create_web_interface

# Expose the Flask server as the WSGI app.
interface = create_web_interface()
app = interface["server"]

if __name__ == '__main__':
    interface["run"](debug=_debug, host=config["WEB_HOST"], port=config["WEB_PORT"])
