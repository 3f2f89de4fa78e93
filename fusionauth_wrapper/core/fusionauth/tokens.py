"""FusionAuth token operations: validation, refresh and logout."""
from __future__ import annotations
import logging

from .client import FusionAuthClient
from .errors import (
    OP_VALIDATE,
    OP_REFRESH,
    OP_LOGOUT,
    raise_for_provider_error,
    success_body,
)
from .exceptions import UnexpectedProviderError
from .models import AuthResult, TokenValidationResult, unverified_claims

logger = logging.getLogger(__name__)

VALIDATE_PATH = "/api/jwt/validate"
REFRESH_PATH = "/api/jwt/refresh"
LOGOUT_PATH = "/api/logout"


class TokenService:
    """Service for checking and renewing FusionAuth access tokens."""
    
    def __init__(self, client: FusionAuthClient):
        self.client = client
    
    def validate_token(self, token: str) -> TokenValidationResult:
        """Ask the provider whether ``token`` is currently valid.
        
        The provider only accepts GET with the token in the Authorization
        header. An invalid or expired token is a normal outcome and comes back
        as ``valid=False``.
        
        Returns:
            TokenValidationResult with the decoded claims when valid
            
        Raises:
            ProtocolMismatchError: Provider answered 405
            TransportError: Network failure or timeout
        """
        secrets = (self.client.config.api_key, token)
        resp = self.client.get(VALIDATE_PATH, bearer_token=token)
        if resp.status_code == 401:
            logger.info("Token rejected by provider (invalid or expired)")
            return TokenValidationResult(valid=False)
        if resp.status_code != 200:
            raise_for_provider_error(OP_VALIDATE, resp, VALIDATE_PATH, secrets)
        
        payload = success_body(OP_VALIDATE, resp, VALIDATE_PATH, secrets)
        claims = payload.get("jwt")
        return TokenValidationResult(valid=True, claims=claims if isinstance(claims, dict) else {})
    
    def refresh_token(self, token: str) -> AuthResult:
        """Exchange a refresh token for a new access token.
        
        Returns:
            AuthResult with the new token; user id comes from its subject
            
        Raises:
            TokenNotRefreshableError: Token expired beyond grace or revoked
            TransportError: Network failure
        """
        secrets = (self.client.config.api_key, token)
        resp = self.client.post(REFRESH_PATH, json={"refreshToken": token})
        if resp.status_code != 200:
            raise_for_provider_error(OP_REFRESH, resp, REFRESH_PATH, secrets)
        
        payload = success_body(OP_REFRESH, resp, REFRESH_PATH, secrets)
        new_token = payload.get("token")
        if not new_token:
            raise UnexpectedProviderError("Refresh response carries no token", resp.status_code, "", REFRESH_PATH)
        result = AuthResult.from_response(payload, user_id=unverified_claims(new_token).get("sub"))
        logger.info(f"Refreshed token for user {result.user_id}")
        return result
    
    def logout(self, refresh_token: str, global_logout: bool = False) -> None:
        """Revoke a refresh token (or every token of its user when global).
        
        Raises:
            TransportError: Network failure
            ClientError: Provider rejected the call
        """
        secrets = (self.client.config.api_key, refresh_token)
        resp = self.client.post(LOGOUT_PATH, json={"refreshToken": refresh_token, "global": global_logout})
        if not 200 <= resp.status_code < 300:
            raise_for_provider_error(OP_LOGOUT, resp, LOGOUT_PATH, secrets)
        logger.info("Logged out refresh token" + (" (global)" if global_logout else ""))
