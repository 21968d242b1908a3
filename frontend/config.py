"""Client-side configuration."""
import os

from dotenv import load_dotenv

load_dotenv()

# One base URL for both proxy endpoints.
BACKEND_URL = os.getenv("EVENT_FINDER_BACKEND_URL", "http://localhost:3000")
