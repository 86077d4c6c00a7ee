"""Configuration module for the Campus Dashboard backend.

This module provides centralized configuration management, including directory
paths, database and API server settings, authentication secrets and calendar
feed defaults. All configuration values can be overridden via environment
variables.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.parent.resolve()

# Data directory (SQLite database lives here unless DATABASE_URL is set)
DATA_DIR_NAME = "data"
DATA_DIR = Path(os.getenv("DATA_DIR", str(ROOT_DIR / DATA_DIR_NAME)))

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/campus_dashboard.db"
)

# Echo SQL statements (debugging only)
DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# --- API Server Configuration ---

API_TITLE: str = "Campus Dashboard API"
API_VERSION: str = "1.0.0"
API_DESCRIPTION: str = (
    "Backend API for the university dashboard: sessions, coaching slots, "
    "groups, users, reports and calendar feeds."
)

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Authentication Configuration ---

# Bearer JWT (mobile app)
JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 30))  # 30 days
)

# Cookie session (web)
SESSION_SECRET_KEY: str = os.getenv("SESSION_SECRET_KEY", JWT_SECRET_KEY)
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "campus_session")
SESSION_MAX_AGE: int = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24 * 14)))
SESSION_HTTPS_ONLY: bool = os.getenv("SESSION_HTTPS_ONLY", "false").lower() == "true"

# Paths under /api that do not require an authenticated user
PUBLIC_API_PREFIXES: List[str] = [
    "/api/auth/",
    "/api/health",
    "/api/calendar/feed.ics",
]

MIN_PASSWORD_LENGTH: int = int(os.getenv("MIN_PASSWORD_LENGTH", "6"))

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Password assigned by the seeding script to users without one
DEFAULT_SEED_PASSWORD: str = os.getenv("DEFAULT_SEED_PASSWORD", "ChangeMe123!")

# --- Domain Configuration ---

PROGRAMS: List[str] = ["DTI", "DI"]
USER_ROLES: List[str] = ["student", "professor", "admin"]
SESSION_TYPES: List[str] = ["lecture", "workshop", "coaching"]
LOCATION_TYPES: List[str] = ["online", "on_campus"]
ATTENDANCE_TYPES: List[str] = ["mandatory", "optional"]
REPORT_TYPES: List[str] = ["feature_request", "bug_report"]
REPORT_STATUSES: List[str] = ["open", "in_progress", "resolved", "closed"]

# The single account allowed to delete reports
REPORT_DELETE_USER_ID: int = int(os.getenv("REPORT_DELETE_USER_ID", "32"))

# Default capacity for new coaching slots (0 means unlimited)
DEFAULT_MAX_PARTICIPANTS: int = 1

# --- Calendar Configuration ---

# Wall-clock times in forms and feeds are interpreted in this zone
CALENDAR_TIMEZONE: str = os.getenv("CALENDAR_TIMEZONE", "Europe/Vienna")
CALENDAR_NAME: str = os.getenv("CALENDAR_NAME", "FH Wien Dashboard")
CALENDAR_DESCRIPTION: str = os.getenv(
    "CALENDAR_DESCRIPTION", "Termine aus dem FH Wien Dashboard"
)
CALENDAR_PRODID: str = "-//FH Wien Dashboard//Calendar Export//DE"
CALENDAR_UID_PREFIX: str = os.getenv("CALENDAR_UID_PREFIX", "fhwien")
CALENDAR_UID_DOMAIN: str = os.getenv("CALENDAR_UID_DOMAIN", "dashboard.fhwien.ac.at")
CALENDAR_FEED_FILENAME: str = "fhwien-calendar.ics"
CALENDAR_FEED_MAX_AGE: int = int(os.getenv("CALENDAR_FEED_MAX_AGE", "300"))

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv("LOG_FORMAT", "detailed")
