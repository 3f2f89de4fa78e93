"""Boundary adapter: provider HTTP status/body -> typed error.

FusionAuth uses different error shapes across endpoints. Every operation hands
its non-success response to ``raise_for_provider_error`` so the mapping lives
in one place.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .exceptions import (
    ClientError,
    ValidationError,
    AuthenticationError,
    AccountLockedError,
    ProtocolMismatchError,
    TokenNotRefreshableError,
    UnexpectedProviderError,
)

logger = logging.getLogger(__name__)

OP_REGISTER = "register"
OP_LOGIN = "login"
OP_VALIDATE = "validate"
OP_REFRESH = "refresh"
OP_LOGOUT = "logout"

REDACTED = "***"

# Same message for unknown user and wrong password
INVALID_CREDENTIALS = "Invalid login credentials"

_LOGIN_LOCKED = {409, 410, 423}
_LOGIN_REJECTED = {202, 401, 404}
_REFRESH_REJECTED = {400, 401, 403, 404}


def _secret_forms(secrets: Iterable[Optional[str]]) -> List[str]:
    """Each secret as written, plus its JSON-escaped form when that differs."""
    forms: List[str] = []
    for secret in secrets:
        if not secret:
            continue
        for form in (secret, json.dumps(secret)[1:-1]):
            if form not in forms:
                forms.append(form)
    return forms


def redact(text: str, secrets: Iterable[Optional[str]]) -> str:
    """Replace each non-empty secret with *** where it stands as a whole token.
    
    A secret glued to word characters on either side is left alone, so a
    one-letter password does not mangle every word containing that letter.
    """
    for form in _secret_forms(secrets):
        pattern = r"(?<!\w)" + re.escape(form) + r"(?!\w)"
        text = re.sub(pattern, REDACTED, text)
    return text


def _redact_value(value: Any, secrets: List[str]) -> Any:
    if isinstance(value, str):
        return redact(value, secrets)
    if isinstance(value, dict):
        return {key: _redact_value(item, secrets) for key, item in value.items()}
    if isinstance(value, list):
        return [_redact_value(item, secrets) for item in value]
    return value


def redact_body(body: str, secrets: Iterable[Optional[str]]) -> str:
    """Redact a provider response body.
    
    JSON objects and arrays are decoded, their string values redacted and the
    result re-serialized, so escaped secrets (quotes, backslashes) are caught
    and keys stay intact. Anything else is redacted as plain text.
    """
    secrets = [secret for secret in secrets if secret]
    if not body or not secrets:
        return body
    try:
        payload = json.loads(body)
    except ValueError:
        return redact(body, secrets)
    if not isinstance(payload, (dict, list)):
        return redact(body, secrets)
    return json.dumps(_redact_value(payload, secrets))


def parse_error_body(body: str) -> Tuple[Dict[str, List[str]], List[str]]:
    """Extract FusionAuth field and general error messages.
    
    The provider returns::
    
        {"fieldErrors": {"user.email": [{"code": "...", "message": "..."}]},
         "generalErrors": [{"code": "...", "message": "..."}]}
    
    Returns:
        (field_errors, general_errors); both empty when the body is not JSON
    """
    try:
        payload = json.loads(body) if body else {}
    except ValueError:
        return {}, []
    if not isinstance(payload, dict):
        return {}, []
    
    field_errors: Dict[str, List[str]] = {}
    raw_fields = payload.get("fieldErrors") or {}
    if isinstance(raw_fields, dict):
        for name, entries in raw_fields.items():
            field_errors[name] = [_message_of(entry) for entry in _as_list(entries)]
    
    general_errors = [_message_of(entry) for entry in _as_list(payload.get("generalErrors"))]
    return field_errors, general_errors


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _message_of(entry: Any) -> str:
    if isinstance(entry, dict):
        return str(entry.get("message") or entry.get("code") or "")
    return str(entry)


def map_provider_error(
    operation: str,
    status_code: int,
    body: str,
    endpoint: str,
    secrets: Iterable[Optional[str]] = (),
) -> ClientError:
    """Translate a non-success provider response into a ClientError.
    
    Args:
        operation: One of the OP_* constants
        status_code: HTTP status returned by the provider
        body: Raw response text
        endpoint: API path that was called
        secrets: Values to scrub from the body before it is kept
        
    Returns:
        The typed error; the caller raises it
    """
    secrets = tuple(secrets)
    raw_body = body or ""
    body = redact_body(raw_body, secrets)
    
    if status_code == 405:
        return ProtocolMismatchError(
            f"Provider rejected the HTTP method for {operation}; the client is using the wrong request shape",
            status_code, body, endpoint,
        )
    
    if operation == OP_REGISTER and status_code == 400:
        field_errors, general_errors = parse_error_body(raw_body)
        field_errors = {name: [redact(m, secrets) for m in msgs] for name, msgs in field_errors.items()}
        general_errors = [redact(m, secrets) for m in general_errors]
        messages = [msg for msgs in field_errors.values() for msg in msgs] + general_errors
        summary = "; ".join(m for m in messages if m) or "Registration rejected by provider"
        return ValidationError(
            summary, status_code, body, endpoint,
            field_errors=field_errors, general_errors=general_errors,
        )
    
    if operation == OP_LOGIN:
        if status_code in _LOGIN_LOCKED:
            return AccountLockedError("Account is locked or not permitted to log in", status_code, body, endpoint)
        if status_code in _LOGIN_REJECTED:
            # Provider body may distinguish unknown user from wrong password; drop it
            return AuthenticationError(INVALID_CREDENTIALS, status_code, "", endpoint)
    
    if operation == OP_REFRESH and status_code in _REFRESH_REJECTED:
        return TokenNotRefreshableError("Token is expired, revoked or otherwise not refreshable", status_code, body, endpoint)
    
    return UnexpectedProviderError(
        f"Unexpected provider response for {operation}", status_code, body, endpoint,
    )


def raise_for_provider_error(operation: str, resp, endpoint: str,
                             secrets: Iterable[Optional[str]] = ()) -> None:
    """Raise the mapped ClientError for ``resp``.
    
    Raises:
        ClientError: Always
    """
    error = map_provider_error(operation, resp.status_code, resp.text, endpoint, secrets)
    logger.warning(f"FusionAuth {operation} failed: kind={error.kind.value} status={resp.status_code}")
    raise error


def success_body(operation: str, resp, endpoint: str,
                 secrets: Iterable[Optional[str]] = ()) -> Dict[str, Any]:
    """Decode a success response, rejecting bodies that are not a JSON object.
    
    Raises:
        UnexpectedProviderError: If the body cannot be decoded
    """
    try:
        payload = resp.json() if resp.text else {}
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise UnexpectedProviderError(
            f"Provider returned a malformed body for {operation}",
            resp.status_code, redact_body(resp.text or "", secrets), endpoint,
        )
    return payload
