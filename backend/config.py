import os
from dotenv import load_dotenv

load_dotenv()

# --------------------
# Configuration
# --------------------
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
CACHE_DIR = os.getenv("CACHE_DIR", os.path.join(BASE_DIR, "cache"))

# Round definitions are seeded at process start; in-memory unless overridden
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite://")

IMAGE_TIMEOUT_SECONDS = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
