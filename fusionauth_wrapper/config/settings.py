"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlparse

from fusionauth_wrapper.core.fusionauth.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0

ENV_BASE_URL = "FUSION_AUTH_URL"
ENV_API_KEY = "FUSION_AUTH_API_KEY"
ENV_CLIENT_ID = "FUSION_AUTH_CLIENT_ID"
ENV_TENANT_ID = "FUSION_AUTH_TENANT_ID"
ENV_TIMEOUT = "FUSION_AUTH_TIMEOUT"

_REQUIRED_FIELDS = ("base_url", "api_key", "application_id", "tenant_id")


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings for one AuthClient instance.
    
    Raises:
        ConfigurationError: If a required field is empty, the base URL is not
            an absolute http(s) URL, or the timeout is not positive
    """
    base_url: str
    api_key: str
    application_id: str
    tenant_id: str
    timeout: float = DEFAULT_TIMEOUT
    
    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__
        if isinstance(self.base_url, str):
            object.__setattr__(self, "base_url", self.base_url.strip().rstrip("/"))
        self.validate()
    
    def validate(self) -> None:
        """Check every invariant; called at construction and by AuthClient."""
        missing = [
            name for name in _REQUIRED_FIELDS
            if not isinstance(getattr(self, name), str) or not getattr(self, name).strip()
        ]
        if missing:
            raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
        
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"base_url is not a well-formed http(s) URL: {self.base_url!r}")
        
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number of seconds, got {self.timeout!r}")
    
    def __repr__(self) -> str:
        parts = []
        for f in fields(self):
            value = "***" if f.name == "api_key" else getattr(self, f.name)
            parts.append(f"{f.name}={value!r}")
        return f"ClientConfig({', '.join(parts)})"


def _load_secret_from_file(secret_name: str, env_var: str | None = None,
                           environ: Optional[Mapping[str, str]] = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).
    
    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)
    
    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback
        environ: Mapping to read instead of os.environ
    
    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name
    
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info(f"Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            logger.warning(f"Failed to read /run/secrets/{secret_name}: {e}")
    
    if env_var:
        source = os.environ if environ is None else environ
        secret_value = source.get(env_var)
        if secret_value:
            logger.info(f"Loaded {env_var} from environment (fallback)")
            return secret_value
    
    return None


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{ENV_TIMEOUT} must be a number, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Build a ClientConfig from FUSION_AUTH_* variables and /run/secrets.
    
    Meant to be called once at process start by the embedding application;
    AuthClient itself never reads the environment.
    
    Args:
        environ: Mapping to read instead of os.environ (tests, embedding apps)
        
    Returns:
        Validated ClientConfig
        
    Raises:
        ConfigurationError: If any required value is missing or malformed
    """
    env = os.environ if environ is None else environ
    
    api_key = _load_secret_from_file("fusion_auth_api_key", ENV_API_KEY, environ=env) or ""
    
    config = ClientConfig(
        base_url=env.get(ENV_BASE_URL, ""),
        api_key=api_key,
        application_id=env.get(ENV_CLIENT_ID, ""),
        tenant_id=env.get(ENV_TENANT_ID, ""),
        timeout=_parse_timeout(env.get(ENV_TIMEOUT)),
    )
    logger.info(f"FusionAuth url={config.base_url}; application={config.application_id}; tenant={config.tenant_id}")
    return config
