import pytest
import requests

from fusionauth_wrapper.core.fusionauth import (
    API_KEY_HEADER,
    TENANT_HEADER,
    AuthClient,
    FusionAuthClient,
    ProtocolMismatchError,
    RegistrationRequest,
    TransportError,
)
from tests.conftest import (
    TEST_API_KEY,
    TEST_BASE_URL,
    TEST_TENANT_ID,
    StubResponse,
    make_jwt,
)


@pytest.fixture
def routed(fake_session):
    token = make_jwt()
    fake_session.route("POST", "/api/user/registration", StubResponse({"user": {"id": "u-1"}}))
    fake_session.route("POST", "/api/login", StubResponse({"user": {"id": "u-1"}, "token": token}))
    fake_session.route("GET", "/api/jwt/validate", StubResponse({"jwt": {"sub": "u-1"}}))
    fake_session.route("POST", "/api/jwt/refresh", StubResponse({"token": token, "refreshToken": "r-2"}))
    fake_session.route("POST", "/api/logout", StubResponse(status_code=200))
    return fake_session


def _run_every_operation(client):
    client.register_user(RegistrationRequest("a@example.com", "A", "B", "Passw0rd!"))
    client.auth_user("a@example.com", "Passw0rd!")
    client.validate_token("access-token")
    client.refresh_token("refresh-token")
    client.logout("refresh-token")


def test_every_request_carries_tenant_and_api_key_headers(auth_client, routed):
    _run_every_operation(auth_client)

    assert len(routed.calls) == 5
    for call in routed.calls:
        assert call["headers"][TENANT_HEADER] == TEST_TENANT_ID, call["path"]
        assert call["headers"][API_KEY_HEADER] == TEST_API_KEY, call["path"]
        assert call["url"].startswith(TEST_BASE_URL)


def test_every_request_uses_configured_timeout(auth_client, routed):
    _run_every_operation(auth_client)
    assert {call["timeout"] for call in routed.calls} == {auth_client.config.timeout}


def test_caller_headers_cannot_drop_tenant_or_key(config, fake_session):
    fake_session.route("GET", "/api/status", StubResponse({}))
    client = FusionAuthClient(config, session=fake_session)

    client.get("/api/status", headers={TENANT_HEADER: "", API_KEY_HEADER: "", "X-Trace": "1"})

    headers = fake_session.last_call["headers"]
    assert headers[TENANT_HEADER] == TEST_TENANT_ID
    assert headers[API_KEY_HEADER] == TEST_API_KEY
    assert headers["X-Trace"] == "1"


def test_api_key_is_authorization_when_no_bearer(config, fake_session):
    fake_session.route("POST", "/api/login", StubResponse({}))
    FusionAuthClient(config, session=fake_session).post("/api/login", json={})
    assert fake_session.last_call["headers"]["Authorization"] == TEST_API_KEY


@pytest.mark.parametrize(
    "exc",
    [
        requests.ConnectionError("connection refused"),
        requests.Timeout("read timed out"),
        requests.exceptions.SSLError("bad certificate"),
        requests.exceptions.InvalidURL("bad url"),
    ],
)
def test_transport_failures_become_transport_error(auth_client, fake_session, exc):
    fake_session.route("POST", "/api/login", exc)

    with pytest.raises(TransportError) as info:
        auth_client.auth_user("a@example.com", "Passw0rd!")

    assert info.value.status_code is None
    assert info.value.__cause__ is exc
    assert "Passw0rd!" not in str(info.value)
    assert TEST_API_KEY not in str(info.value)


def test_timeout_during_validation_is_transport_error(auth_client, fake_session):
    fake_session.route("GET", "/api/jwt/validate", requests.Timeout("timed out"))
    with pytest.raises(TransportError, match="Timed out"):
        auth_client.validate_token("access-token")


def test_method_not_allowed_is_protocol_mismatch_not_transport(auth_client, fake_session):
    fake_session.route("GET", "/api/jwt/validate", StubResponse({}, status_code=405))
    with pytest.raises(ProtocolMismatchError) as info:
        auth_client.validate_token("access-token")
    assert not isinstance(info.value, TransportError)
    assert info.value.status_code == 405


def test_default_session_is_created_and_closed(config, monkeypatch):
    closed = []
    monkeypatch.setattr(requests.Session, "close", lambda self: closed.append(self))

    with AuthClient(config) as client:
        assert isinstance(client._http.session, requests.Session)

    assert len(closed) == 1


def test_injected_session_is_left_open(config, fake_session):
    AuthClient(config, session=fake_session).close()
    assert fake_session.closed is False


def test_caller_header_dict_is_not_mutated(config, fake_session):
    fake_session.route("GET", "/api/status", StubResponse({}))
    caller_headers = {"X-Trace": "1"}

    FusionAuthClient(config, session=fake_session).get("/api/status", headers=caller_headers)

    assert caller_headers == {"X-Trace": "1"}
    assert fake_session.last_call["headers"][API_KEY_HEADER] == TEST_API_KEY
