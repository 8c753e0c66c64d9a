"""
Build configuration for the Wikipefia content pipeline.

Values come from environment variables. A ``.env`` file at the repository
root is loaded first when present, so local overrides do not need to be
exported in the shell. Command-line flags in ``Ingress/`` take precedence
over everything here.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

_env_path = BASE_DIR / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

# ============================================================================
# Paths
# ============================================================================

CONTENT_DIR = Path(os.environ.get("CONTENT_DIR", str(BASE_DIR / "content")))
BUILD_DIR = Path(os.environ.get("CONTENT_BUILD_DIR", str(BASE_DIR / ".content-build")))
PUBLIC_SEARCH_DIR = Path(
    os.environ.get("PUBLIC_SEARCH_DIR", str(BASE_DIR / "public" / "search"))
)

# ============================================================================
# Build tuning
# ============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
SEARCH_EXCERPT_LENGTH = int(os.environ.get("SEARCH_EXCERPT_LENGTH", "160"))
SEARCH_HASH_LENGTH = int(os.environ.get("SEARCH_HASH_LENGTH", "12"))
COMPILE_WORKERS = int(os.environ.get("COMPILE_WORKERS", "1"))

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging for command-line entry points."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
