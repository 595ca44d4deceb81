"""All-or-nothing HTTP access gate.

:class:`AccessGate` turns ``AccessEvaluator.check_access`` into a request
filter: when the check fails the request is short-circuited with a
``403`` response whose JSON payload is ``{"error": "Access Denied"}``;
otherwise control passes on to the wrapped handler.

The gate holds no access logic of its own.  Three adapters are provided,
all built on the standard library:

- :meth:`AccessGate.wrap` for plain callables,
- :meth:`AccessGate.wsgi` for WSGI applications,
- :meth:`GateResponse.write_to` for ``http.server`` request handlers.

Example
-------
::

    gate = AccessGate(evaluator, "guest", "user:123:write")

    @gate.wrap
    def update_user(user_id: str) -> dict[str, object]:
        return {"updated": user_id}

    update_user("123")  # GateResponse(status=403, ...) for a guest
"""
from __future__ import annotations

import functools
import json
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from permiflow.evaluator import AccessEvaluator

logger = logging.getLogger(__name__)

_R = TypeVar("_R")

WsgiApp = Callable[[dict[str, Any], Callable[..., Any]], Iterable[bytes]]


def _access_denied_payload() -> dict[str, object]:
    return {"error": "Access Denied"}


@dataclass(frozen=True)
class GateResponse:
    """The standard response returned when the gate refuses a request."""

    status: int = HTTPStatus.FORBIDDEN.value
    payload: dict[str, object] = field(default_factory=_access_denied_payload)

    def body(self) -> bytes:
        """The JSON-encoded payload."""
        return json.dumps(self.payload).encode("utf-8")

    @property
    def status_line(self) -> str:
        """WSGI-style status line, e.g. ``"403 Forbidden"``."""
        return f"{self.status} {HTTPStatus(self.status).phrase}"

    def write_to(self, handler: BaseHTTPRequestHandler) -> None:
        """Send this response through an ``http.server`` request handler."""
        body = self.body()
        handler.send_response(self.status)
        handler.send_header("Content-Type", "application/json")
        handler.send_header("Content-Length", str(len(body)))
        handler.end_headers()
        handler.wfile.write(body)


ACCESS_DENIED = GateResponse()


class AccessGate:
    """Request filter bound to one (role, permission key) pair.

    Parameters
    ----------
    evaluator:
        The evaluator answering the access check.
    role_name:
        Role to check.
    permission:
        Permission key the request requires.
    response:
        Response returned on refusal (default :data:`ACCESS_DENIED`).
    """

    def __init__(
        self,
        evaluator: AccessEvaluator,
        role_name: str,
        permission: str,
        response: GateResponse = ACCESS_DENIED,
    ) -> None:
        self._evaluator = evaluator
        self._role_name = role_name
        self._permission = permission
        self._response = response

    def check(self) -> GateResponse | None:
        """Return ``None`` if access is granted, else the refusal response."""
        if self._evaluator.check_access(self._role_name, self._permission):
            return None
        logger.info(
            "Gate refused request: role=%s permission=%s",
            self._role_name,
            self._permission,
        )
        return self._response

    def wrap(self, handler: Callable[..., _R]) -> Callable[..., _R | GateResponse]:
        """Decorate ``handler`` so it only runs when access is granted."""

        @functools.wraps(handler)
        def gated(*args: Any, **kwargs: Any) -> _R | GateResponse:
            refusal = self.check()
            if refusal is not None:
                return refusal
            return handler(*args, **kwargs)

        return gated

    def wsgi(self, app: WsgiApp) -> WsgiApp:
        """Wrap a WSGI application, answering refused requests with JSON."""

        def gated_app(
            environ: dict[str, Any],
            start_response: Callable[..., Any],
        ) -> Iterable[bytes]:
            refusal = self.check()
            if refusal is None:
                return app(environ, start_response)
            body = refusal.body()
            start_response(
                refusal.status_line,
                [
                    ("Content-Type", "application/json"),
                    ("Content-Length", str(len(body))),
                ],
            )
            return [body]

        return gated_app

    @property
    def role_name(self) -> str:
        return self._role_name

    @property
    def permission(self) -> str:
        return self._permission


def require_access(
    evaluator: AccessEvaluator,
    role_name: str,
    permission: str,
) -> Callable[[Callable[..., _R]], Callable[..., _R | GateResponse]]:
    """Decorator form of :meth:`AccessGate.wrap`."""
    return AccessGate(evaluator, role_name, permission).wrap
