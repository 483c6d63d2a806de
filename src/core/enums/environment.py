"""Runtime environment types.

Only DEVELOPMENT changes behavior: logs render for the console instead of
JSON unless LOG_JSON overrides it.
"""

from enum import Enum


class Environment(str, Enum):
    """Runtime environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
