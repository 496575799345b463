"""
Druid SQL Client Configuration.

Connection settings for DruidClient, with environment overrides and
validation of the URI and TLS settings.
"""

import os
import platform
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from druidsql.config.env import get_bool_env, get_float_env
from druidsql.exceptions import ConfigurationError
from druidsql.version import __version__

DEFAULT_CONNECT_TIMEOUT = 300


@dataclass
class DruidClientConfig:
  """Configuration for Druid SQL clients."""

  # Connection settings
  uri: str = ""
  # Seconds to wait for a response after connecting; 0 waits forever
  timeout: float = 0
  # Seconds to wait for a connection; 0 means the default
  connect_timeout: float = DEFAULT_CONNECT_TIMEOUT

  # TLS and credentials
  tls_ca_certificate_bundle: Optional[str] = None
  insecure_plaintext_login: bool = False

  # Request settings
  user_agent_prefix: Optional[str] = None
  headers: Dict[str, str] = field(default_factory=dict)

  # Instrumentation
  slow_query_threshold_ms: Optional[float] = None

  @classmethod
  def from_env(cls, prefix: str = "DRUIDSQL_CLIENT_") -> "DruidClientConfig":
    """
    Create configuration from environment variables.

    Args:
        prefix: Environment variable prefix

    Returns:
        DruidClientConfig instance
    """
    config = cls()

    env_mappings = {
      "uri": ("URI", str),
      "timeout": ("TIMEOUT", float),
      "connect_timeout": ("CONNECT_TIMEOUT", float),
      "tls_ca_certificate_bundle": ("TLS_CA_CERTIFICATE_BUNDLE", str),
      "insecure_plaintext_login": ("INSECURE_PLAINTEXT_LOGIN", bool),
      "user_agent_prefix": ("USER_AGENT_PREFIX", str),
      "slow_query_threshold_ms": ("SLOW_QUERY_THRESHOLD_MS", float),
    }

    for attr, (env_suffix, attr_type) in env_mappings.items():
      key = prefix + env_suffix
      if key not in os.environ:
        continue

      if attr_type is bool:
        setattr(config, attr, get_bool_env(key))
      elif attr_type is float:
        setattr(config, attr, get_float_env(key, getattr(config, attr)))
      else:
        setattr(config, attr, os.environ[key])

    return config

  def with_overrides(self, **kwargs: Any) -> "DruidClientConfig":
    """
    Create a new config with overridden values.

    Raises:
        ConfigurationError: If an option is not a known setting
    """
    known = {f.name for f in fields(self)}
    unknown = sorted(set(kwargs) - known)
    if unknown:
      raise ConfigurationError(f"Unknown client options: {', '.join(unknown)}")

    overrides: Dict[str, Any] = {"headers": self.headers.copy(), **kwargs}
    return replace(self, **overrides)

  def validate(self) -> None:
    """
    Check the URI and TLS settings.

    Raises:
        ConfigurationError: If the configuration can't be used safely
    """
    parts = urlsplit(self.uri)

    if parts.scheme not in ("http", "https") or not parts.hostname:
      raise ConfigurationError("URI must be a HTTP or HTTPS URI")

    has_credentials = parts.username is not None or parts.password is not None
    plaintext = parts.scheme == "http" and not self.insecure_plaintext_login
    if has_credentials and plaintext:
      raise ConfigurationError(
        "Credentials cannot be provided in a HTTP URI without setting the "
        "insecure_plaintext_login option. Beware that setting this option exposes "
        "your credentials to anyone on the network and should not be used outside "
        "of development."
      )

    ca_bundle = self.tls_ca_certificate_bundle
    if ca_bundle is not None:
      if not os.path.exists(ca_bundle):
        raise ConfigurationError(
          f"TLS CA certificate bundle file at {ca_bundle} is missing"
        )
      if os.path.isdir(ca_bundle):
        raise ConfigurationError(
          f"TLS CA certificate bundle file at {ca_bundle} is a directory, "
          "but should be a file/symlink"
        )
      if not os.access(ca_bundle, os.R_OK):
        raise ConfigurationError(
          f"TLS CA certificate bundle file at {ca_bundle} is not readable "
          "by this user"
        )

  def user_agent(self) -> str:
    parts = [
      self.user_agent_prefix,
      f"druidsql/{__version__}",
      f"httpx/{httpx.__version__}",
      f"Python/{platform.python_version()}",
    ]
    return " ".join(part for part in parts if part)

  def httpx_timeout(self) -> httpx.Timeout:
    # httpx uses None for no limit
    return httpx.Timeout(
      self.timeout or None,
      connect=self.connect_timeout or DEFAULT_CONNECT_TIMEOUT,
    )
