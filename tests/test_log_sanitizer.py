import logging

from fastapi.testclient import TestClient

from agent_gateway.context import AppContext
from agent_gateway.log_sanitizer import REDACTED, sanitize_headers_for_log
from agent_gateway.routes import create_app


def test_sanitize_headers_for_log_redacts_common_secrets():
    sanitized = sanitize_headers_for_log(
        {
            "x-api-key": "sk-test-123",
            "Authorization": "Bearer secret",
            "Cookie": "a=b",
            "X-Client-Token": "t",
            "User-Agent": "pytest",
        }
    )
    assert sanitized["x-api-key"] == REDACTED
    assert sanitized["Authorization"] == REDACTED
    assert sanitized["Cookie"] == REDACTED
    assert sanitized["X-Client-Token"] == REDACTED
    assert sanitized["User-Agent"] == "pytest"


def test_request_logging_middleware_does_not_leak_credentials(caplog):
    caplog.set_level(logging.INFO, logger="agentgateway")
    client = TestClient(create_app(AppContext()))

    secret_auth = "Bearer should-not-appear"
    secret_cookie = "session=should-not-appear"
    resp = client.get(
        "/__test_log_sanitizer_not_found__",
        headers={"Authorization": secret_auth, "Cookie": secret_cookie},
    )

    assert resp.status_code == 404
    assert resp.json()["error"] == "http_error"
    joined = "\n".join(record.getMessage() for record in caplog.records)
    assert secret_auth not in joined
    assert secret_cookie not in joined
    assert REDACTED in joined
