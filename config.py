import os
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")

# One token file per browser client lives here; unset keeps tokens in memory only
SESSION_DIR = os.path.expanduser(os.getenv("SESSION_DIR", "")) or None

# Upload limits enforced before anything is sent to the server
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
ALLOWED_EXTENSIONS = (".csv", ".xls", ".xlsx")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
