import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./playlist.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Credentials and session tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    SESSION_TOKEN_TTL_HOURS = data.get("SESSION_TOKEN_TTL_HOURS", 24)
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "userToken")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS", 12)

    # Password reset
    RESET_TOKEN_TTL_MINUTES = data.get("RESET_TOKEN_TTL_MINUTES", 30)
    RESET_TOKEN_SWEEP_ENABLED = bool(data.get("RESET_TOKEN_SWEEP_ENABLED", True))
    RESET_TOKEN_SWEEP_INTERVAL_SECONDS = data.get("RESET_TOKEN_SWEEP_INTERVAL_SECONDS", 600)
    RESET_LINK_BASE_URL = data.get(
        "RESET_LINK_BASE_URL", "http://localhost:3000/reset-password"
    )

    # Outbound mail (fastapi-mail)
    MAIL_SERVER = data.get("MAIL_SERVER", "smtp.ethereal.email")
    MAIL_PORT = data.get("MAIL_PORT", 587)
    MAIL_USERNAME = data.get("MAIL_USERNAME", "")
    MAIL_PASSWORD = data.get("MAIL_PASSWORD", "")
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@example.com")
    MAIL_FROM_NAME = data.get("MAIL_FROM_NAME", "Playlist")
    MAIL_STARTTLS = bool(data.get("MAIL_STARTTLS", True))
    MAIL_SSL_TLS = bool(data.get("MAIL_SSL_TLS", False))
    MAIL_SUPPRESS_SEND = bool(data.get("MAIL_SUPPRESS_SEND", True))
