"""FusionAuth user operations: registration and login."""
from __future__ import annotations
import logging

from .client import FusionAuthClient
from .errors import (
    OP_REGISTER,
    OP_LOGIN,
    raise_for_provider_error,
    success_body,
)
from .exceptions import UnexpectedProviderError
from .models import AuthResult, RegistrationRequest

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/user/registration"
LOGIN_PATH = "/api/login"


class UserService:
    """Service for registering and authenticating FusionAuth users."""
    
    def __init__(self, client: FusionAuthClient):
        """Initialize user service.
        
        Args:
            client: Configured FusionAuth client
        """
        self.client = client
    
    def register_user(self, req: RegistrationRequest) -> AuthResult:
        """Create a user and register it with the configured application.
        
        Not idempotent: a retried call may create a duplicate account or fail
        with a duplicate-email ValidationError.
        
        Args:
            req: Registration details
            
        Returns:
            AuthResult with the new user id and the initial token, if issued
            
        Raises:
            ValidationError: Provider rejected the input
            TransportError: Network failure
            ClientError: Any other mapped provider failure
        """
        secrets = (self.client.config.api_key, req.password)
        resp = self.client.post(REGISTER_PATH, json=req.to_payload(self.client.config.application_id))
        if resp.status_code not in (200, 201):
            raise_for_provider_error(OP_REGISTER, resp, REGISTER_PATH, secrets)
        
        result = AuthResult.from_response(success_body(OP_REGISTER, resp, REGISTER_PATH, secrets))
        if not result.user_id:
            raise UnexpectedProviderError(
                "Registration response carries no user id", resp.status_code, "", REGISTER_PATH,
            )
        logger.info(f"Registered user {result.user_id}")
        return result
    
    def auth_user(self, email: str, password: str) -> AuthResult:
        """Log a user in to the configured application.
        
        Args:
            email: Login id
            password: Password
            
        Returns:
            AuthResult with user id and token
            
        Raises:
            AuthenticationError: Invalid credentials (unknown user and wrong
                password are indistinguishable)
            AccountLockedError: Provider reports the account as locked
            TransportError: Network failure
        """
        secrets = (self.client.config.api_key, password)
        payload = {
            "loginId": email,
            "password": password,
            "applicationId": self.client.config.application_id,
        }
        resp = self.client.post(LOGIN_PATH, json=payload)
        if resp.status_code != 200:
            raise_for_provider_error(OP_LOGIN, resp, LOGIN_PATH, secrets)
        
        result = AuthResult.from_response(success_body(OP_LOGIN, resp, LOGIN_PATH, secrets))
        if not result.user_id or not result.token:
            raise UnexpectedProviderError(
                "Login response carries no user id or token", resp.status_code, "", LOGIN_PATH,
            )
        logger.info(f"Authenticated user {result.user_id}")
        return result
