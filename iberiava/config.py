# iberiava/config.py
from __future__ import annotations
import os
from datetime import timedelta
from dotenv import load_dotenv
from flask import current_app, has_app_context

load_dotenv()


def _read_secret_file(path: str) -> str | None:
    try:
        if os.path.exists(path):
            with open(path, "r") as f:
                return f.read().strip()
    except OSError:
        pass
    return None


class Config:
    # Flask
    # Prefer Docker secret -> env (FLASK_SECRET or SECRET_KEY) -> dev fallback
    SECRET_KEY = (
        _read_secret_file("/run/secrets/flask_secret")
        or os.getenv("FLASK_SECRET")
        or os.getenv("SECRET_KEY")
        or os.getenv("SESSION_SECRET")
        or "dev-secret-change-me"
    )
    ENV = os.getenv("FLASK_ENV", "production")
    DEBUG = ENV != "production"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Storage
    DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
    ROUTES_FILE = os.getenv("ROUTES_FILE", os.path.join(DATA_DIR, "routes.json"))
    AIRCRAFT = tuple(
        a.strip().upper() for a in os.getenv("AIRCRAFT", "A350,A320,B757,B727").split(",") if a.strip()
    )
    BOOK_ID_RETRIES = int(os.getenv("BOOK_ID_RETRIES", "5"))

    # Discord OAuth (identity exchange)
    DISCORD_CLIENT_ID = os.getenv("DISCORD_CLIENT_ID") or os.getenv("CLIENT_ID", "")
    DISCORD_CLIENT_SECRET = os.getenv("DISCORD_CLIENT_SECRET") or os.getenv("CLIENT_SECRET", "")
    DISCORD_REDIRECT_URI = (
        os.getenv("DISCORD_REDIRECT_URI") or os.getenv("REDIRECT_URI", "http://localhost:3000/callback")
    )
    DISCORD_API_BASE = os.getenv("DISCORD_API_BASE", "https://discord.com/api")
    DISCORD_TIMEOUT = float(os.getenv("DISCORD_TIMEOUT", "15"))

    # API bearer tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret-change-me")
    TOKEN_TTL = timedelta(hours=float(os.getenv("TOKEN_TTL_HOURS", "24")))

    # Rate Limits
    LOGIN_RATE = os.getenv("LOGIN_RATE", "20 per hour")
    BOOK_RATE = os.getenv("BOOK_RATE", "120 per hour")
    RATELIMIT_ENABLED = os.getenv("RATELIMIT_ENABLED", "1") == "1"

    # CORS (disabled by default)
    ENABLE_CORS = os.getenv("ENABLE_CORS", "0") == "1"

    def __init__(self, **overrides):
        for key, value in overrides.items():
            if not hasattr(type(self), key):
                raise AttributeError(f"Unknown config key: {key}")
            setattr(self, key, value)


config = Config()


def get_config() -> Config:
    """The running app's Config inside an app context, the env-built one elsewhere."""
    if has_app_context():
        return current_app.extensions.get("iberiava.config", config)
    return config
