"""Configuration settings for the Canvas Submission Grader."""

import os
import logging
from typing import Final

# Debug flag: 1 = debug mode (verbose logging), 0 = production mode
DEBUG: Final[int] = int(os.environ.get("GRADER_DEBUG", "0"))

# --- Canvas API Settings ---

# Root of the Canvas instance, e.g. https://canvas.example.edu
# Both values are checked by auth.get_credentials() when the workflow starts.
CANVAS_BASE_URL: Final[str | None] = os.environ.get("CANVAS_BASE_URL")
CANVAS_ACCESS_TOKEN: Final[str | None] = os.environ.get("CANVAS_ACCESS_TOKEN")

# Seconds allowed for any single HTTP request (API call or attachment download)
HTTP_TIMEOUT: Final[float] = float(os.environ.get("GRADER_HTTP_TIMEOUT", "30"))

# Pagination size for API list calls
DEFAULT_PAGE_SIZE: Final[int] = 100

# Upper bound on in-flight profile requests; 0 means one request per submission at once
MAX_CONCURRENCY: Final[int] = int(os.environ.get("GRADER_MAX_CONCURRENCY", "0"))

# --- File Paths ---
# Per-student extraction directories are created under this directory
DOWNLOAD_DIR: Final[str] = os.environ.get("GRADER_DOWNLOAD_DIR", ".")
# Define log file path within a /logs subdirectory
LOG_DIR: Final[str] = "logs"
LOG_FILE: Final[str] = os.environ.get("GRADER_LOG_FILE", os.path.join(LOG_DIR, "grader_app.log"))

# --- Inspection Settings ---

# Files whose (lower-cased) name matches this pattern are checked for the
# student's family name and opened in the editor during review.
GRADED_FILE_PATTERN: Final[str] = os.environ.get("GRADED_FILE_PATTERN", r"readme|\.c|\.h|makefile")

# Sentence every README has to contain; compared case-insensitively.
README_DISCLAIMER: Final[str] = os.environ.get(
    "README_DISCLAIMER",
    "by submitting this file to carmen, i certify that i have performed all",
)

# --- Review Tools ---
DEFAULT_EDITOR: Final[str] = "vi"
DEFAULT_SHELL: Final[str] = "sh"

# --- Batch Behaviour ---
# 0 = stop the run at the first submission that fails (default)
# 1 = record the failure and move on to the next selected submission
CONTINUE_ON_ERROR: Final[bool] = os.environ.get("GRADER_CONTINUE_ON_ERROR", "0") == "1"

# --- Logging Configuration ---
# LOG_LEVEL is used for file logging, console logging is only enabled in DEBUG mode
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO
# Structured log format: timestamp, level, logger, module.function:line, message
LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(module)s.%(funcName)s:%(lineno)d | %(message)s'
