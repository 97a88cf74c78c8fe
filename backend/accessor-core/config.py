from __future__ import annotations

import os

from dotenv import load_dotenv  # type: ignore

load_dotenv()

HOST = os.getenv("ACCESSOR_CORE_HOST", "127.0.0.1").strip()
PORT = int(os.getenv("ACCESSOR_CORE_PORT", "7075"))

LOG_LEVEL = (os.getenv("ACCESSOR_CORE_LOG_LEVEL") or "").strip().upper() or "INFO"

# reject uploads above this size with 413
MAX_SOURCE_BYTES = int(os.getenv("ACCESSOR_CORE_MAX_SOURCE_BYTES", str(512 * 1024)))

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "ACCESSOR_CORE_CORS_ORIGINS",
        "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173",
    ).split(",")
    if o.strip()
]
