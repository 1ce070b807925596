import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _split_csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv("DATABASE_URL", "")
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.cors_origins: List[str] = [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "https://cubedev.xyz",
        ] + _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS", ""))
        self.frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

        # WCA OAuth
        self.wca_client_id: str = os.getenv("WCA_CLIENT_ID", "")
        self.wca_client_secret: str = os.getenv("WCA_CLIENT_SECRET", "")
        self.wca_redirect_uri: str = os.getenv("WCA_REDIRECT_URI", "http://localhost:8000/auth/callback")
        self.wca_scope: str = "public"
        self.wca_auth_url: str = "https://www.worldcubeassociation.org/oauth/authorize"
        self.wca_token_url: str = "https://www.worldcubeassociation.org/oauth/token"
        self.wca_api_base_url: str = "https://www.worldcubeassociation.org/api/v0"

        # JWT
        # Set JWT_SECRET_KEY in production; the fallback is for local development only.
        self.jwt_secret_key: str = os.getenv("JWT_SECRET_KEY", "fallback-secret")
        self.jwt_algorithm: str = "HS256"
        self.jwt_expire_minutes: int = int(os.getenv("JWT_EXPIRE_MINUTES", 60 * 24 * 7))  # 7 days by default

        # Challenge rooms
        self.room_lifetime_hours: int = int(os.getenv("ROOM_LIFETIME_HOURS", 48))
        self.room_retention_days: int = int(os.getenv("ROOM_RETENTION_DAYS", 30))
        self.room_sweep_window_minutes: int = int(os.getenv("ROOM_SWEEP_WINDOW_MINUTES", 60))
        self.room_sweep_interval_minutes: int = int(os.getenv("ROOM_SWEEP_INTERVAL_MINUTES", 60))
        self.room_sweeper_enabled: bool = os.getenv("ROOM_SWEEPER_ENABLED", "True").lower() == "true"
        self.room_code_length: int = int(os.getenv("ROOM_CODE_LENGTH", 6))
        self.room_code_max_attempts: int = int(os.getenv("ROOM_CODE_MAX_ATTEMPTS", 10))
        self.public_rooms_default_limit: int = 20

settings = Settings()
