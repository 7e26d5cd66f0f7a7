import os

from dotenv import load_dotenv

load_dotenv()

REQUIRED_KEYS = ("CLIENT_ID", "CLIENT_SECRET", "REFRESH_TOKEN")

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    # Strava app credentials
    CLIENT_ID = os.getenv("CLIENT_ID")
    CLIENT_SECRET = os.getenv("CLIENT_SECRET")
    REFRESH_TOKEN = os.getenv("REFRESH_TOKEN")
    ACCESS_TOKEN = os.getenv("ACCESS_TOKEN")
    # PIN gate
    ACCESS_PIN = os.getenv("ACCESS_PIN", "1234")
    MAX_PIN_ATTEMPTS = int(os.getenv("MAX_PIN_ATTEMPTS", "3"))
    LOCKOUT_SECONDS = int(os.getenv("LOCKOUT_SECONDS", str(3 * 60 * 60)))
    # Upload workflow
    UPLOAD_POLL_ATTEMPTS = int(os.getenv("UPLOAD_POLL_ATTEMPTS", "20"))
    UPLOAD_POLL_INTERVAL = float(os.getenv("UPLOAD_POLL_INTERVAL", "3"))
    DEFAULT_ACTIVITY_NAME = os.getenv("DEFAULT_ACTIVITY_NAME", "Uploaded from EnduranceARC T-Rex3")
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads"))
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(25 * 1024 * 1024)))
    # Strava API
    STRAVA_TOKEN_URL = os.getenv("STRAVA_TOKEN_URL", "https://www.strava.com/oauth/token")
    STRAVA_UPLOADS_URL = os.getenv("STRAVA_UPLOADS_URL", "https://www.strava.com/api/v3/uploads")
    STRAVA_READY_STATUS = "Your activity is ready."
    STRAVA_TIMEOUT = float(os.getenv("STRAVA_TIMEOUT", "30"))
    # Flask-Limiter
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "true").lower() != "false"
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "10 per second")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    PIN_RATELIMIT = os.getenv("PIN_RATELIMIT", "10 per minute")
    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    # Client shell; empty means same origin
    API_BASE_URL = os.getenv("API_BASE_URL", "")
    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "4000"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def missing_keys(config) -> list[str]:
    return [key for key in REQUIRED_KEYS if not config.get(key)]


def mask(value: str | None) -> str | None:
    if not value:
        return None
    return "****"
