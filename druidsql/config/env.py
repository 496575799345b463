"""
Environment variable configuration.

Type-safe helpers for reading environment variables and the process-wide
settings that are not specific to a single client instance.
"""

import os


def get_float_env(key: str, default: float) -> float:
  """
  Get a float environment variable with safe type conversion.

  Args:
      key: Environment variable name
      default: Default value if not set or invalid

  Returns:
      Float value from environment or default
  """
  try:
    return float(os.getenv(key, str(default)))
  except (ValueError, TypeError):
    print(f"Warning: Invalid {key} value, using default: {default}")
    return default


def get_bool_env(key: str, default: bool = False) -> bool:
  """Get a boolean environment variable."""
  value = os.getenv(key, str(default)).lower()
  return value in ("true", "1", "yes", "on")


def get_str_env(key: str, default: str = "") -> str:
  """Get a string environment variable."""
  return os.getenv(key, default)


class EnvConfig:
  """Process-wide settings read once at import time."""

  ENVIRONMENT = get_str_env("ENVIRONMENT", "dev")
  # Empty means the per-environment default
  LOG_LEVEL = get_str_env("LOG_LEVEL", "")

  # Queries slower than this are logged at WARNING
  SLOW_QUERY_THRESHOLD_MS = get_float_env("DRUIDSQL_SLOW_QUERY_THRESHOLD_MS", 1000.0)
