"""Request and result values exchanged with the FusionAuth API.

All values are transient: built per call, handed to the caller, never cached.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt


@dataclass(frozen=True)
class RegistrationRequest:
    email: str
    first_name: str
    last_name: str
    password: str = field(repr=False)
    tenant_specific_username: bool = False
    
    def to_payload(self, application_id: str) -> Dict[str, Any]:
        """Build the provider's combined user + registration body."""
        registration: Dict[str, Any] = {"applicationId": application_id}
        if self.tenant_specific_username:
            registration["username"] = self.email
        return {
            "user": {
                "email": self.email,
                "firstName": self.first_name,
                "lastName": self.last_name,
                "password": self.password,
            },
            "registration": registration,
        }


@dataclass(frozen=True)
class AuthResult:
    user_id: Optional[str]
    token: Optional[str] = field(default=None, repr=False)
    expiry: Optional[datetime] = None
    refresh_token: Optional[str] = field(default=None, repr=False)
    
    @classmethod
    def from_response(cls, payload: Dict[str, Any], user_id: Optional[str] = None) -> "AuthResult":
        """Build a result from a login, registration or refresh response body.
        
        Args:
            payload: Decoded JSON body
            user_id: Fallback user id when the body carries none (refresh)
        """
        user = payload.get("user") or {}
        token = payload.get("token")
        return cls(
            user_id=user.get("id") or user_id,
            token=token,
            expiry=_expiry_from(payload.get("tokenExpirationInstant"), token),
            refresh_token=payload.get("refreshToken"),
        )


@dataclass(frozen=True)
class TokenValidationResult:
    valid: bool
    claims: Optional[Dict[str, Any]] = None


def _expiry_from(instant_ms: Any, token: Optional[str]) -> Optional[datetime]:
    """Resolve token expiry from the provider instant, else the JWT exp claim."""
    if isinstance(instant_ms, (int, float)) and not isinstance(instant_ms, bool):
        return datetime.fromtimestamp(instant_ms / 1000, tz=timezone.utc)
    exp = unverified_claims(token).get("exp")
    if isinstance(exp, (int, float)) and not isinstance(exp, bool):
        return datetime.fromtimestamp(exp, tz=timezone.utc)
    return None


def unverified_claims(token: Optional[str]) -> Dict[str, Any]:
    """Read JWT claims without checking the signature.
    
    Only used for display fields (expiry, subject); the provider remains the
    authority on validity. Returns {} for anything that is not a JWT.
    """
    if not token:
        return {}
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return {}
    return claims if isinstance(claims, dict) else {}
