# barbershop/config.py

import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# SQLite file by default; any SQLAlchemy URL works (e.g. postgresql://...)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barbershop.db")
SQL_ECHO = _flag("SQL_ECHO")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Seed business hours, services and the settings row on first start
SEED_DEFAULTS = _flag("SEED_DEFAULTS", "true")

BUSINESS_NAME = os.getenv("BUSINESS_NAME", "029 Barber Shop")
