# unihub/config.py
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Store Configuration
STORE_BACKEND = os.getenv("UNIHUB_STORE_BACKEND", "file").lower()
STORE_PATH = os.getenv("UNIHUB_STORE_PATH", "unihub_store.json")

# MongoDB Configuration
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017/")
MONGODB_DB = os.getenv("MONGODB_DB", "unihub")
MONGODB_COLLECTION = os.getenv("MONGODB_COLLECTION", "records")


def parse_timeout(value: str) -> float:
    """Seconds to wait for an answer; 0 or a negative value disables the wait."""
    try:
        seconds = float(value)
    except ValueError:
        raise ValueError(f"ASSISTANT_RESOLVE_TIMEOUT must be a number of seconds, got {value!r}") from None
    return max(seconds, 0.0)


# Assistant Configuration (0 disables the bounded wait)
ASSISTANT_RESOLVE_TIMEOUT = parse_timeout(os.getenv("ASSISTANT_RESOLVE_TIMEOUT", "10"))

# System Configuration
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO").upper()
