"""Centralized configuration for the activity dashboard"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


# =============================================================================
# Base Paths
# =============================================================================

BASE_DIR = Path(__file__).parent.parent
DATA_DIR = BASE_DIR / "data"
EXPORTS_DIR = DATA_DIR / "exports"


# =============================================================================
# GitHub Configuration
# =============================================================================

# API
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
GITHUB_GRAPHQL_URL = os.getenv("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql")
GITHUB_WEB_URL = "https://github.com"

# Parallel requests per load (primary lists and per-commit PR lookups)
GITHUB_MAX_WORKERS = 8

# Project board lookup
KANBAN_STATUS_FIELD = "Status"
KANBAN_PROJECT_ITEMS = 20


# =============================================================================
# Settings Configuration
# =============================================================================

SETTINGS_PATH = Path(os.getenv("CM2GIT_SETTINGS_PATH", DATA_DIR / "settings.json"))

SETTING_OWNER = "cm2git-owner"
SETTING_REPO = "cm2git-repo"
SETTING_TOKEN = "cm2git-token"
SETTING_THEME = "cm2git-theme"
SETTING_VIEW = "cm2git-view"

THEMES = ["light", "dark"]
VIEW_MODES = ["cards", "grid"]


# =============================================================================
# Activity View Configuration
# =============================================================================

TYPE_FILTERS = ["all", "PR", "commit", "merge"]
SORT_ORDERS = ["desc", "asc"]

DEFAULT_TYPE_FILTER = "all"
DEFAULT_SORT_ORDER = "desc"


# =============================================================================
# Logging Configuration
# =============================================================================

LOG_LEVEL = os.getenv("CM2GIT_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = None) -> None:
    """Configure root logging for entry points (web app, exporter)"""
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=LOG_FORMAT)
