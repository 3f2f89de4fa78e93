"""Low-level HTTP client for the FusionAuth REST API.

Handles URL building, the tenant/API-key headers and transport failures.
Status interpretation is left to the services (see errors.py).
"""
from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import requests

from .exceptions import ConfigurationError, TransportError

if TYPE_CHECKING:
    from fusionauth_wrapper.config.settings import ClientConfig

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-FusionAuth-TenantId"
API_KEY_HEADER = "X-API-Key"


class FusionAuthClient:
    """HTTP client for the FusionAuth API.
    
    Features:
    - Tenant and API-key headers on every request
    - Every requests exception re-raised as TransportError
    - Injectable session (any object with a requests-compatible ``request``)
    
    Usage:
        client = FusionAuthClient(config)
        resp = client.post("/api/login", json={...})
    """
    
    def __init__(self, config: "ClientConfig", session: Optional[requests.Session] = None):
        """Initialize FusionAuth client.
        
        Args:
            config: Validated client configuration
            session: HTTP session to use (a new requests.Session by default)
            
        Raises:
            ConfigurationError: If config is missing or invalid
        """
        if config is None:
            raise ConfigurationError("A ClientConfig is required")
        config.validate()
        self.config = config
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
    
    @property
    def base_url(self) -> str:
        return self.config.base_url
    
    def default_headers(self) -> Dict[str, str]:
        """Headers every request carries, whatever the endpoint."""
        return {
            TENANT_HEADER: self.config.tenant_id,
            API_KEY_HEADER: self.config.api_key,
            "Accept": "application/json",
        }
    
    def get(self, path: str, bearer_token: Optional[str] = None, **kwargs) -> requests.Response:
        """Execute GET request.
        
        Args:
            path: API endpoint path (e.g., "/api/jwt/validate")
            bearer_token: Token sent as ``Authorization: Bearer``; the API key
                is used as Authorization when omitted
            **kwargs: Additional arguments for session.request
            
        Returns:
            Response object, whatever its status
            
        Raises:
            TransportError: On network failure
        """
        return self._request("GET", path, bearer_token=bearer_token, **kwargs)
    
    def post(self, path: str, json: Optional[Dict[str, Any]] = None, bearer_token: Optional[str] = None,
             **kwargs) -> requests.Response:
        """Execute POST request.
        
        Args:
            path: API endpoint path
            json: JSON payload
            bearer_token: See get()
            **kwargs: Additional arguments for session.request
            
        Returns:
            Response object, whatever its status
            
        Raises:
            TransportError: On network failure
        """
        return self._request("POST", path, json=json, bearer_token=bearer_token, **kwargs)
    
    def _request(self, method: str, path: str, bearer_token: Optional[str] = None, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self.default_headers())
        if bearer_token is not None:
            headers["Authorization"] = f"Bearer {bearer_token}"
        else:
            headers["Authorization"] = self.config.api_key
        
        logger.debug(f"{method} {path}")
        try:
            return self.session.request(method, url, headers=headers, timeout=self.config.timeout, **kwargs)
        except requests.Timeout as e:
            raise TransportError(f"Timed out after {self.config.timeout}s calling {path}", endpoint=path) from e
        except requests.RequestException as e:
            # Exception text can embed the URL only; headers are never included
            raise TransportError(f"{type(e).__name__} calling {path}", endpoint=path) from e
    
    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()
