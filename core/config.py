import os
import logging
from dotenv import load_dotenv

# Load .env from project root
try:
    load_dotenv(dotenv_path=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".env")))
except Exception:
    try:
        load_dotenv()
    except Exception:
        pass

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _env_flag(name: str, default: str) -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes", "on")


# Server
HOST = (os.getenv("HOST", "0.0.0.0") or "0.0.0.0").strip()
PORT = int(os.getenv("PORT", "3000") or "3000")

# Storage
EMAILS_FILE = (os.getenv("EMAILS_FILE", "") or "").strip().strip('"').strip("'") or os.path.join(PROJECT_ROOT, "emails.json")
PUBLIC_DIR = (os.getenv("PUBLIC_DIR", "") or "").strip().strip('"').strip("'") or os.path.join(PROJECT_ROOT, "public")

# Promotion: one shared code for every claimant, no expiry or redemption tracking
DISCOUNT_CODE = (os.getenv("DISCOUNT_CODE", "SOURDOUGH10") or "SOURDOUGH10").strip()

# Admin listing is unauthenticated; set EMAIL_LISTING_ENABLED=0 to turn it off entirely
EMAIL_LISTING_ENABLED = _env_flag("EMAIL_LISTING_ENABLED", "1")

# Report a signup whose store write failed as a 500 instead of a silent 200
FAIL_ON_WRITE_ERROR = _env_flag("FAIL_ON_WRITE_ERROR", "1")

ALLOWED_ORIGINS = [o.strip() for o in (os.getenv("ALLOWED_ORIGINS") or "*").split(",") if o.strip()]

LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("signups")
