"""FusionAuth REST API client library.

This package turns the provider's registration, login and JWT endpoints into
typed, non-retrying operations.

Architecture:
- client.py: HTTP client adding tenant/API-key headers, transport error wrapping
- errors.py: Single adapter mapping provider status/body to typed errors
- users.py: Registration and login
- tokens.py: Token validation, refresh and logout
- auth_client.py: AuthClient facade over the services
- models.py: Request/result values
- exceptions.py: Typed exceptions for error handling

Usage:
    from fusionauth_wrapper.config import load_settings
    from fusionauth_wrapper.core.fusionauth import AuthClient, AuthenticationError
    
    client = AuthClient(load_settings())
    try:
        result = client.auth_user("alice@example.com", "secret")
    except AuthenticationError:
        ...
"""
from .auth_client import AuthClient
from .client import FusionAuthClient, TENANT_HEADER, API_KEY_HEADER
from .exceptions import (
    ErrorKind,
    ClientError,
    ConfigurationError,
    ValidationError,
    AuthenticationError,
    AccountLockedError,
    ProtocolMismatchError,
    TokenNotRefreshableError,
    TransportError,
    UnexpectedProviderError,
)
from .models import AuthResult, RegistrationRequest, TokenValidationResult
from .tokens import TokenService
from .users import UserService

__all__ = [
    # Client
    "AuthClient",
    "FusionAuthClient",
    "TENANT_HEADER",
    "API_KEY_HEADER",
    
    # Services
    "UserService",
    "TokenService",
    
    # Models
    "AuthResult",
    "RegistrationRequest",
    "TokenValidationResult",
    
    # Exceptions
    "ErrorKind",
    "ClientError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "AccountLockedError",
    "ProtocolMismatchError",
    "TokenNotRefreshableError",
    "TransportError",
    "UnexpectedProviderError",
]
