"""
Configuration module for FactGPT.

Centralizes configuration with environment variable support.
"""

import os
from pathlib import Path
from typing import Dict

# ============================================================
# Environment Configuration
# ============================================================

ENV = os.getenv("FACTGPT_ENV", "dev")  # dev|stage|prod

# Storage
DB_PATH = os.getenv("FACTGPT_DB_PATH", "data/factgpt.db")

# Question limits (UTF-8 bytes reserved for the prompt)
PROMPT_MAX_BYTES = int(os.getenv("FACTGPT_PROMPT_MAX_BYTES", "100"))

# Oracle network
ORACLE_URL = os.getenv("FACTGPT_ORACLE_URL", "")
ORACLE_TIMEOUT = float(os.getenv("FACTGPT_ORACLE_TIMEOUT", "5"))

# Logging
LOG_LEVEL = os.getenv("FACTGPT_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("FACTGPT_LOG_JSON", "true").lower() in ("1", "true", "yes")


# ============================================================
# Validation
# ============================================================

def validate_config() -> Dict[str, bool]:
    """
    Check that the configured resources are usable.
    Returns dict of name -> ok.
    """
    db_parent = Path(DB_PATH).parent
    return {
        "db_path": not Path(DB_PATH).is_dir() and not db_parent.is_file(),
        "oracle_url": bool(ORACLE_URL) or not is_production(),
        "prompt_max_bytes": PROMPT_MAX_BYTES > 0,
        "oracle_timeout": ORACLE_TIMEOUT > 0,
    }


# ============================================================
# Feature Flags
# ============================================================

def is_production() -> bool:
    """Check if running in production mode."""
    return ENV == "prod"


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("FACTGPT_DEBUG", "").lower() in ("1", "true", "yes")
