"""Tests for AccessGate, GateResponse and require_access."""
from __future__ import annotations

import io
import json
from unittest.mock import MagicMock

import pytest

from permiflow.evaluator import AccessEvaluator
from permiflow.gate import ACCESS_DENIED, AccessGate, GateResponse, require_access


@pytest.fixture()
def evaluator() -> AccessEvaluator:
    evaluator = AccessEvaluator()
    evaluator.create_role("guest", ["user:123:read"])
    evaluator.create_role("admin", ["user:123:read", "user:123:write"])
    return evaluator


def _hello_app(environ: dict[str, object], start_response: MagicMock) -> list[bytes]:
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"hello"]


# ---------------------------------------------------------------------------
# GateResponse
# ---------------------------------------------------------------------------


class TestGateResponse:
    def test_defaults(self) -> None:
        assert ACCESS_DENIED.status == 403
        assert ACCESS_DENIED.payload == {"error": "Access Denied"}

    def test_body_is_json(self) -> None:
        assert json.loads(ACCESS_DENIED.body()) == {"error": "Access Denied"}

    def test_status_line(self) -> None:
        assert ACCESS_DENIED.status_line == "403 Forbidden"

    def test_write_to_request_handler(self) -> None:
        handler = MagicMock()
        handler.wfile = io.BytesIO()
        ACCESS_DENIED.write_to(handler)
        handler.send_response.assert_called_once_with(403)
        handler.send_header.assert_any_call("Content-Type", "application/json")
        handler.end_headers.assert_called_once()
        assert json.loads(handler.wfile.getvalue()) == {"error": "Access Denied"}

    def test_custom_response(self) -> None:
        response = GateResponse(status=401, payload={"error": "Login required"})
        assert response.status_line == "401 Unauthorized"


# ---------------------------------------------------------------------------
# AccessGate.check / wrap
# ---------------------------------------------------------------------------


class TestCheck:
    def test_allowed_returns_none(self, evaluator: AccessEvaluator) -> None:
        assert AccessGate(evaluator, "guest", "user:123:read").check() is None

    def test_denied_returns_403(self, evaluator: AccessEvaluator) -> None:
        assert AccessGate(evaluator, "guest", "user:123:write").check() is ACCESS_DENIED

    def test_unknown_role_denied(self, evaluator: AccessEvaluator) -> None:
        assert AccessGate(evaluator, "ghost", "user:123:read").check() is ACCESS_DENIED

    def test_properties(self, evaluator: AccessEvaluator) -> None:
        gate = AccessGate(evaluator, "guest", "user:123:read")
        assert gate.role_name == "guest"
        assert gate.permission == "user:123:read"


class TestWrap:
    def test_allowed_calls_handler(self, evaluator: AccessEvaluator) -> None:
        handler = MagicMock(return_value="ok")
        gated = AccessGate(evaluator, "admin", "user:123:write").wrap(handler)
        assert gated("a", key="b") == "ok"
        handler.assert_called_once_with("a", key="b")

    def test_denied_short_circuits(self, evaluator: AccessEvaluator) -> None:
        handler = MagicMock(return_value="ok")
        gated = AccessGate(evaluator, "guest", "user:123:write").wrap(handler)
        assert gated() is ACCESS_DENIED
        handler.assert_not_called()

    def test_decision_is_made_per_call(self, evaluator: AccessEvaluator) -> None:
        gated = AccessGate(evaluator, "guest", "user:123:read").wrap(lambda: "ok")
        assert gated() == "ok"
        evaluator.get_role("guest").deactivate()  # type: ignore[union-attr]
        assert gated() is ACCESS_DENIED

    def test_require_access_decorator(self, evaluator: AccessEvaluator) -> None:
        @require_access(evaluator, "admin", "user:123:write")
        def update_user(user_id: str) -> dict[str, object]:
            """Update a user."""
            return {"updated": user_id}

        assert update_user("123") == {"updated": "123"}
        assert update_user.__name__ == "update_user"


# ---------------------------------------------------------------------------
# AccessGate.wsgi
# ---------------------------------------------------------------------------


class TestWsgi:
    def test_allowed_passes_through(self, evaluator: AccessEvaluator) -> None:
        app = AccessGate(evaluator, "guest", "user:123:read").wsgi(_hello_app)
        start_response = MagicMock()
        assert app({}, start_response) == [b"hello"]
        start_response.assert_called_once_with("200 OK", [("Content-Type", "text/plain")])

    def test_denied_returns_json_403(self, evaluator: AccessEvaluator) -> None:
        app = AccessGate(evaluator, "guest", "user:123:write").wsgi(_hello_app)
        start_response = MagicMock()
        body = b"".join(app({}, start_response))
        status, headers = start_response.call_args.args
        assert status == "403 Forbidden"
        assert ("Content-Type", "application/json") in headers
        assert json.loads(body) == {"error": "Access Denied"}
