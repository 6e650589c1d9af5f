import os
from dotenv import load_dotenv

# Load .env from project root (parent of frontend directory)
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(ROOT_DIR, ".env"))

# --------------------
# Configuration
# --------------------
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
IMAGE_TIMEOUT_SECONDS = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "10"))
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "30"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

# Scoring: 100 points for an exact guess, one point lost per 100 km
MAX_ROUND_SCORE = 100.0
KM_PER_POINT = 100.0

# Map widget
MAP_CENTER = (0.0, 0.0)
MAP_MIN_ZOOM = 2
MAP_TILES = "OpenStreetMap"
MAP_HEIGHT = 450
FIT_PADDING = (50, 50)
GUESS_MARKER_COLOR = "blue"
ACTUAL_MARKER_COLOR = "#22c55e"
LINE_COLOR = "#ef4444"
