"""Pytest shared fixtures for FusionAuth client tests."""
import json
import pathlib
import sys
import threading
import time
from typing import Callable, Dict, Optional, Tuple, Union
from urllib.parse import urlparse

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import jwt
import pytest
import requests

from fusionauth_wrapper.config import ClientConfig
from fusionauth_wrapper.core.fusionauth import AuthClient


TEST_API_KEY = "test-api-key-0123456789"
TEST_APPLICATION_ID = "85a03867-dccf-4882-adde-1a79aeec50df"
TEST_TENANT_ID = "30663132-6464-6665-3032-326466613934"
TEST_BASE_URL = "https://auth.example.test"


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch):
    """Prevent unit tests from reaching a live FusionAuth instance."""
    def _refuse(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _refuse)


# ─────────────────────────────────────────────────────────────────────────────
# Fake Transport
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    def __init__(self, payload=None, status_code: int = 200, text: Optional[str] = None):
        self._payload = payload
        self.status_code = status_code
        if text is not None:
            self.text = text
        else:
            self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        if self._payload is None:
            return json.loads(self.text)
        return self._payload


Handler = Union[StubResponse, Exception, Callable[..., StubResponse]]


class FakeSession:
    """requests.Session stand-in recording every request it receives."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def request(self, method, url, headers=None, json=None, timeout=None, **kwargs):
        path = urlparse(url).path
        call = {
            "method": method,
            "url": url,
            "path": path,
            "headers": dict(headers or {}),
            "json": json,
            "timeout": timeout,
            "kwargs": kwargs,
        }
        with self._lock:
            self.calls.append(call)
        handler = self.routes.get((method.upper(), path))
        if handler is None:
            return StubResponse({"error": "no route"}, status_code=405)
        if isinstance(handler, Exception):
            raise handler
        if callable(handler) and not isinstance(handler, StubResponse):
            return handler(call)
        return handler

    def close(self):
        self.closed = True

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture()
def fake_session():
    return FakeSession()


@pytest.fixture()
def config():
    return ClientConfig(
        base_url=TEST_BASE_URL,
        api_key=TEST_API_KEY,
        application_id=TEST_APPLICATION_ID,
        tenant_id=TEST_TENANT_ID,
    )


@pytest.fixture()
def auth_client(config, fake_session):
    return AuthClient(config, session=fake_session)


# ─────────────────────────────────────────────────────────────────────────────
# JWT Token Helpers
# ─────────────────────────────────────────────────────────────────────────────
def make_jwt(sub: str = "user-123", exp_offset: int = 3600, **claims) -> str:
    """Create an HS256 JWT shaped like the provider's access tokens."""
    now = int(time.time())
    payload = {
        "sub": sub,
        "iat": now,
        "exp": now + exp_offset,
        "tid": TEST_TENANT_ID,
        "applicationId": TEST_APPLICATION_ID,
    }
    payload.update(claims)
    return jwt.encode(payload, "test-signing-secret", algorithm="HS256")
