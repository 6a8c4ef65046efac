# /educenter/core/config.py

"""
Runtime configuration for the back-office API.

Every value is read from the environment once at import time. A `.env` file
placed at the project root is loaded first, so local development does not
need exported variables.
"""

import os
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv

# Load the .env that sits at the project root (one level above the package).
load_dotenv(Path(__file__).resolve().parents[2] / ".env")


class Settings:
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./educenter.db")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    # Seven days, matching the lifetime the front-end expects.
    JWT_EXPIRES_MINUTES: int = int(os.getenv("JWT_EXPIRES_MINUTES", str(60 * 24 * 7)))

    CURRENCY_RATE_URL: str = os.getenv("CURRENCY_RATE_URL", "https://www.floatrates.com/daily/uzs.json")
    CURRENCY_TIMEOUT_SECONDS: float = float(os.getenv("CURRENCY_TIMEOUT_SECONDS", "5"))
    FALLBACK_USD_RATE: Decimal = Decimal(os.getenv("FALLBACK_USD_RATE", "0.000079"))

    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "Asia/Tashkent")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # First billing month considered when carrying unpaid balances forward.
    BILLING_EPOCH_YEAR: int = 2020
    BILLING_EPOCH_MONTH: int = 1


settings = Settings()
