import os
import threading


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ["true", "1", "yes", "on"]


class PortalSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE", "development")
        self.DATABASE_URL = os.environ.get("DATABASE_URL") or self._postgres_url()
        self.TOKEN_SECRET = os.environ.get("TOKEN_SECRET")
        self.SESSION_TTL_HOURS = int(os.environ.get("SESSION_TTL_HOURS", "24"))
        self.SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "portal_session")
        self.CORS_ORIGINS = [o.strip() for o in os.environ.get("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
        self.AUTO_CREATE_SCHEMA = _env_flag(
            "AUTO_CREATE_SCHEMA", "false" if self.DEBUG_MODE == "production" else "true"
        )

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(PortalSettings, cls).__new__(cls)
        return cls._instance

    @staticmethod
    def _postgres_url() -> str:
        user = os.environ.get("POSTGRES_USER", "postgres")
        password = os.environ.get("POSTGRES_PASSWORD", "")
        host = os.environ.get("POSTGRES_URL", "localhost:5432")
        db = os.environ.get("POSTGRES_DB", "portal")
        return f"postgresql://{user}:{password}@{host}/{db}"


settings = PortalSettings()
