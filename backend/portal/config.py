"""
Runtime configuration read from environment variables.

Every setting has a development default so the service starts with no
environment at all. Modules should read these as ``config.NAME`` at call time
rather than importing the values, so tests can monkeypatch them.
"""

import os

# Database connection string (PostgreSQL in production, SQLite locally)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./climate_portal.db")

# Signing key for the session cookie
SESSION_SECRET = os.getenv("SESSION_SECRET", "climate-champion-secret-key")

# Static admin credentials. Compared in plaintext, see services/auth.py
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@climate")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# Where uploaded PDFs are written
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")

# Per-file upload ceiling (5 MiB)
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# bcrypt work factor for student password hashes
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Inclusive bounds for an assigned score
MIN_SCORE = 0
MAX_SCORE = 100

# Inclusive bounds for a registering student's age
MIN_AGE = 5
MAX_AGE = 25
