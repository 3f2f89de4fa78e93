"""FusionAuth-specific exceptions for error handling.

Every failure raised by the client carries an ``ErrorKind`` tag so callers can
either catch a single subclass or switch on ``err.kind``.
"""
from __future__ import annotations
from enum import Enum
from typing import Optional, Dict, List


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    ACCOUNT_LOCKED = "account_locked"
    PROTOCOL_MISMATCH = "protocol_mismatch"
    TOKEN_NOT_REFRESHABLE = "token_not_refreshable"
    TRANSPORT = "transport"
    UNEXPECTED_PROVIDER = "unexpected_provider"


class ClientError(Exception):
    """Base exception for all FusionAuth operations.
    
    Attributes:
        kind: Error taxonomy tag
        message: Human readable summary (never contains secrets)
        status_code: HTTP status returned by the provider, if any
        body: Redacted provider response body, if any
        endpoint: API path that failed, if any
    """
    
    kind: ErrorKind = ErrorKind.UNEXPECTED_PROVIDER
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        endpoint: str = "",
    ):
        self.message = message
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(self._format())
    
    def _format(self) -> str:
        if self.status_code is None:
            return f"[{self.kind.value}] {self.message}"
        return f"[{self.kind.value}] [{self.status_code}] {self.endpoint}: {self.message}"


class ConfigurationError(ClientError):
    """ClientConfig is missing a field or has a malformed one."""
    kind = ErrorKind.CONFIGURATION


class ValidationError(ClientError):
    """Provider rejected the input (password policy, duplicate email...).
    
    Attributes:
        field_errors: Mapping of provider field name to its messages
        general_errors: Messages not tied to a specific field
    """
    kind = ErrorKind.VALIDATION
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: str = "",
        endpoint: str = "",
        field_errors: Optional[Dict[str, List[str]]] = None,
        general_errors: Optional[List[str]] = None,
    ):
        self.field_errors = field_errors or {}
        self.general_errors = general_errors or []
        super().__init__(message, status_code, body, endpoint)


class AuthenticationError(ClientError):
    """Invalid credentials."""
    kind = ErrorKind.AUTHENTICATION


class AccountLockedError(ClientError):
    """Provider reports the account as locked or otherwise barred from login."""
    kind = ErrorKind.ACCOUNT_LOCKED


class ProtocolMismatchError(ClientError):
    """Wrong HTTP method or request shape used against the provider."""
    kind = ErrorKind.PROTOCOL_MISMATCH


class TokenNotRefreshableError(ClientError):
    """Refresh attempted with an expired or revoked token."""
    kind = ErrorKind.TOKEN_NOT_REFRESHABLE


class TransportError(ClientError):
    """Network, timeout, DNS or connection failure with no provider response."""
    kind = ErrorKind.TRANSPORT


class UnexpectedProviderError(ClientError):
    """Provider responded with a status or shape the client does not recognize."""
    kind = ErrorKind.UNEXPECTED_PROVIDER
