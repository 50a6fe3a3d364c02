"""
Storefront configuration.

Values come from the environment (and a local .env, which never overrides
variables that are already set). Settings that are only needed by one
backend are validated lazily by whoever uses them.
"""
import os
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

load_dotenv(".env", override=False)


def _split_codes(raw: str) -> Tuple[str, ...]:
    """Split a comma separated list, dropping blanks and surrounding spaces."""
    return tuple(code.strip() for code in raw.split(",") if code.strip())


# Cart persistence: memory | file | redis
CART_STORAGE = os.environ.get("CART_STORAGE", "file").strip().lower()
CART_FILE_PATH = os.environ.get(
    "CART_FILE_PATH", str(Path.home() / ".xepi" / "cart.json")
)

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")

# Hosted catalog (Firebase Realtime Database REST endpoint)
FIREBASE_DATABASE_URL = os.environ.get("FIREBASE_DATABASE_URL", "").rstrip("/")
FIREBASE_AUTH = os.environ.get("FIREBASE_AUTH", "")

# Categories that share the combined bulk tier
BULK_CATEGORY_CODES = _split_codes(os.environ.get("BULK_CATEGORY_CODES", "cuadros,rotulos"))

# Order submission
ORDER_PHONE = os.environ.get("ORDER_PHONE", "")
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "Q")
