"""Application configuration."""

from decimal import Decimal
from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "LiveMart Orders API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./livemart.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    admin_email: str = getenv("ADMIN_EMAIL", "admin@livemart.local")
    admin_password: str = getenv("ADMIN_PASSWORD", "")
    delivery_fee: Decimal = Decimal(getenv("DELIVERY_FEE", "40.00"))
    coupon_code: str = getenv("COUPON_CODE", "LIVEMART10")
    coupon_percent: Decimal = Decimal(getenv("COUPON_PERCENT", "10"))
    delivery_lead_days: int = int(getenv("DELIVERY_LEAD_DAYS", "7"))
    delivery_hour: int = int(getenv("DELIVERY_HOUR", "14"))
    earnings_per_delivery: Decimal = Decimal(getenv("EARNINGS_PER_DELIVERY", "500.00"))


settings: Settings = Settings()
