"""JSON request boundary for the explanation engine.

Transport is left to the host: :meth:`ExplainWebAPI.dispatch` takes a
method, a path and a raw body and returns ``(status, headers, payload)``.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from linewise.explain.orchestrator import ExplanationOrchestrator
from linewise.utils.errors import FallbackError, InputError
from linewise.utils.logging import get_logger

logger = get_logger(__name__)

Response = Tuple[int, Dict[str, str], str]
HttpHandler = Callable[[str], Awaitable[Response]]


@dataclass
class ApiRoute:
    method: str
    path: str
    handler: HttpHandler


def _json(status: int, payload: object) -> Response:
    return status, {"Content-Type": "application/json"}, json.dumps(payload)


class ExplainWebAPI:
    """Route ``/api/explain`` and ``/api/ping`` requests."""

    def __init__(self, orchestrator: ExplanationOrchestrator, *, ping_message: Optional[str] = None) -> None:
        self._orchestrator = orchestrator
        self._ping_message = ping_message
        self._routes: List[ApiRoute] = []
        self._register_routes()

    # -- routing -----------------------------------------------------------------
    def _register_routes(self) -> None:
        self.add_route("GET", "/api/ping", self._handle_ping)
        self.add_route("POST", "/api/explain", self._handle_explain)

    def add_route(self, method: str, path: str, handler: HttpHandler) -> None:
        self._routes.append(ApiRoute(method, path, handler))
        logger.debug("route registered", extra={"path": path})

    async def dispatch(self, method: str, path: str, body: str = "") -> Response:
        route = next((r for r in self._routes if r.method == method.upper() and r.path == path), None)
        if route is None:
            status, headers, payload = _json(404, {"error": "not found"})
        else:
            status, headers, payload = await route.handler(body)
        headers["Content-Length"] = str(len(payload.encode("utf-8")))
        logger.debug("request handled", extra={"path": path, "status": status})
        return status, headers, payload

    # -- handlers ----------------------------------------------------------------
    async def _handle_ping(self, body: str) -> Response:
        message = self._ping_message or os.environ.get("PING_MESSAGE", "ping")
        return _json(200, {"message": message})

    async def _handle_explain(self, body: str) -> Response:
        try:
            request = json.loads(body) if body else {}
        except json.JSONDecodeError:
            return _json(400, {"error": "Code is required"})
        code = request.get("code") if isinstance(request, dict) else None
        if not isinstance(code, str):
            return _json(400, {"error": "Code is required"})
        try:
            result = await self._orchestrator.explain(code)
        except InputError as exc:
            return _json(400, {"error": str(exc)})
        except FallbackError as exc:
            logger.error("explain request failed", extra={"reason": str(exc.__cause__ or exc)})
            return _json(500, {"error": str(exc)})
        return _json(200, result.to_dict())


__all__ = ["ExplainWebAPI", "ApiRoute"]
