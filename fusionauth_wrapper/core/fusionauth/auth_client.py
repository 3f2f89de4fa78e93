"""Public facade over the FusionAuth services."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional

import requests

from .client import FusionAuthClient
from .models import AuthResult, RegistrationRequest, TokenValidationResult
from .tokens import TokenService
from .users import UserService

if TYPE_CHECKING:
    from fusionauth_wrapper.config.settings import ClientConfig


class AuthClient:
    """Typed client for registration, login, token validation and refresh.
    
    Stateless apart from the immutable config: safe to share between threads.
    No call is retried; retry policy belongs to the caller.
    
    Usage:
        client = AuthClient(load_settings())
        result = client.auth_user("alice@example.com", "secret")
        client.validate_token(result.token)
    """
    
    def __init__(self, config: "ClientConfig", session: Optional[requests.Session] = None):
        """Initialize the client.
        
        Args:
            config: Fully populated ClientConfig
            session: Optional HTTP transport (requests.Session compatible)
            
        Raises:
            ConfigurationError: If config is missing or invalid
        """
        self._http = FusionAuthClient(config, session=session)
        self._users = UserService(self._http)
        self._tokens = TokenService(self._http)
    
    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> "AuthClient":
        """Build a client from FUSION_AUTH_* variables (see load_settings)."""
        from fusionauth_wrapper.config.settings import load_settings
        
        return cls(load_settings(), session=session)
    
    @property
    def config(self) -> "ClientConfig":
        return self._http.config
    
    def register_user(self, req: RegistrationRequest) -> AuthResult:
        return self._users.register_user(req)
    
    def auth_user(self, email: str, password: str) -> AuthResult:
        return self._users.auth_user(email, password)
    
    def validate_token(self, token: str) -> TokenValidationResult:
        return self._tokens.validate_token(token)
    
    def refresh_token(self, token: str) -> AuthResult:
        return self._tokens.refresh_token(token)
    
    def logout(self, refresh_token: str, global_logout: bool = False) -> None:
        self._tokens.logout(refresh_token, global_logout=global_logout)
    
    def close(self) -> None:
        self._http.close()
    
    def __enter__(self) -> "AuthClient":
        return self
    
    def __exit__(self, *exc) -> None:
        self.close()
