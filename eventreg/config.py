import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


@dataclass(frozen=True)
class Settings:
    """Runtime configuration read from the environment."""

    jwt_secret: str
    jwt_expire_minutes: int
    razorpay_key_id: str
    razorpay_secret_key: str
    payment_currency: str
    database_url: str
    upload_dir: str
    public_base_url: str
    max_upload_mb: int
    admin_token: str
    cors_origins: list
    rate_limit_per_hour: int
    log_level: str


def get_settings() -> Settings:
    # Built per call so tests can patch os.environ.
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_expire_minutes=int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24))),
        razorpay_key_id=os.getenv("RZP_KEY_ID", ""),
        razorpay_secret_key=os.getenv("RZP_SECRET_KEY", ""),
        payment_currency=os.getenv("PAYMENT_CURRENCY", "INR"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./eventreg.db"),
        upload_dir=os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:4242").rstrip("/"),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10")),
        admin_token=os.getenv("ADMIN_TOKEN", ""),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        rate_limit_per_hour=int(os.getenv("RATE_LIMIT_PER_HOUR", "100000")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
