import pytest

SUCCESS_META_KEYS = {
    "requestId",
    "correlationId",
    "path",
    "method",
    "lang",
    "ipv4",
    "ipv6",
    "duration",
    "message",
    "timestamp",
}
ERROR_META_KEYS = {
    "requestId",
    "correlationId",
    "path",
    "method",
    "lang",
    "errorCategory",
    "message",
    "timestamp",
    "ipv4",
    "ipv6",
}
CATEGORIES = {
    "VALIDATION",
    "AUTHENTICATION",
    "AUTHORIZATION",
    "NOT_FOUND",
    "DATABASE",
    "EXTERNAL_SERVICE",
    "RATE_LIMIT",
    "BUSINESS_LOGIC",
    "INTERNAL",
    "UNKNOWN",
}


@pytest.mark.parametrize("path", ["/", "/health", "/test/items/1", "/test/list", "/test/no-message"])
def test_success_envelope_shape(client, path):
    response = client.get(path)
    body = response.json()
    assert set(body) == {"success", "statusCode", "meta", "data"}
    assert body["success"] is True
    assert body["statusCode"] == response.status_code
    assert set(body["meta"]) == SUCCESS_META_KEYS
    assert body["meta"]["requestId"] == response.headers["x-request-id"]
    assert body["meta"]["correlationId"] == response.headers["x-correlation-id"]


@pytest.mark.parametrize(
    "path",
    [
        "/test/boom",
        "/test/database",
        "/test/upstream",
        "/test/error-only",
        "/test/unauthorized",
        "/test/forbidden",
        "/test/limited",
        "/test/conflict",
        "/test/rule",
        "/missing",
    ],
)
def test_error_envelope_shape(client, path):
    response = client.get(path)
    body = response.json()
    assert set(body) == {"success", "statusCode", "meta"}
    assert body["success"] is False
    assert body["statusCode"] == response.status_code
    assert response.status_code >= 400
    assert set(body["meta"]) == ERROR_META_KEYS
    assert body["meta"]["errorCategory"] in CATEGORIES
    assert body["meta"]["requestId"] == response.headers["x-request-id"]


def test_errors_field_only_for_validation_lists(client):
    meta = client.get("/test/validation").json()["meta"]
    assert set(meta) == ERROR_META_KEYS | {"errors"}
    assert all(isinstance(v, list) for v in meta["errors"].values())
