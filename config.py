import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    APP_ENV = data.get("APP_ENV", "dev")
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Access tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ACCESS_TTL_MINUTES = int(data.get("JWT_ACCESS_TTL_MINUTES", 15))

    # Refresh tokens
    REFRESH_TOKEN_PEPPER = data.get("REFRESH_TOKEN_PEPPER", "change-me-refresh-pepper")
    REFRESH_TTL_DAYS = int(data.get("REFRESH_TTL_DAYS", 7))
    REFRESH_TOKENS_PER_USER = int(data.get("REFRESH_TOKENS_PER_USER", 10))

    # Email verification
    VERIFICATION_CODE_PEPPER = data.get(
        "VERIFICATION_CODE_PEPPER", "change-me-verification-pepper"
    )
    VERIFY_CODE_TTL_SECONDS = int(data.get("VERIFY_CODE_TTL_SECONDS", 300))
    VERIFY_RESEND_COOLDOWN_SECONDS = int(data.get("VERIFY_RESEND_COOLDOWN_SECONDS", 60))
    VERIFY_MAX_ATTEMPTS = int(data.get("VERIFY_MAX_ATTEMPTS", 5))
    # Verification codes are written to the log only in development
    DEV_MAILER_ECHO = bool(
        data.get("DEV_MAILER_ECHO", str(APP_ENV).lower() in ("dev", "development"))
    )

    # Password login
    LOGIN_MAX_FAILED_ATTEMPTS = int(data.get("LOGIN_MAX_FAILED_ATTEMPTS", 5))
    LOGIN_LOCKOUT_MINUTES = int(data.get("LOGIN_LOCKOUT_MINUTES", 15))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
