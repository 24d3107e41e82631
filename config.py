import os

# Server
PORT = int(os.getenv("PORT", "8080"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Comma-separated list of origins allowed by CORS
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Renderer profile used when a request does not name one
DEFAULT_PROFILE = os.getenv("DEFAULT_PROFILE", "durable")

# Trailing window (days) of history rows averaged into the baseline
BASELINE_WINDOW_DAYS = int(os.getenv("BASELINE_WINDOW_DAYS", "56"))
