import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./videohub.db")

CORS_ORIGIN = _get_list(os.getenv("CORS_ORIGIN"), default=["*"])
REQUEST_BODY_LIMIT_BYTES = int(os.getenv("REQUEST_BODY_LIMIT_BYTES", str(16 * 1024)))

PUBLIC_DIR = os.getenv("PUBLIC_DIR", "public")
TEMP_UPLOAD_DIR = os.getenv("TEMP_UPLOAD_DIR", os.path.join(PUBLIC_DIR, "temp"))

ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "change-me")
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRES_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRES_MINUTES", "1440"))
REFRESH_TOKEN_EXPIRES_MINUTES = int(os.getenv("REFRESH_TOKEN_EXPIRES_MINUTES", "14400"))

COOKIE_SECURE = _get_bool(os.getenv("COOKIE_SECURE"), default=True)

CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY", "")
CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET", "")
CLOUDINARY_UPLOAD_TIMEOUT_SECONDS = float(os.getenv("CLOUDINARY_UPLOAD_TIMEOUT_SECONDS", "60"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() != "production":
        return
    if ACCESS_TOKEN_SECRET == "change-me":
        raise RuntimeError("ACCESS_TOKEN_SECRET must be set in production.")
    if REFRESH_TOKEN_SECRET == "change-me":
        raise RuntimeError("REFRESH_TOKEN_SECRET must be set in production.")
