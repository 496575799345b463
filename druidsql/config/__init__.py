"""
Configuration package for druidsql.

Holds process-wide environment settings and the logging configuration.
Client connection settings live in druidsql.client.config.
"""

from .env import EnvConfig

__all__ = [
  "EnvConfig",
]
