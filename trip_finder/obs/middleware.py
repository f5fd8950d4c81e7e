"""ASGI middleware for lightweight observability."""

from typing import Callable, Any
import time
import uuid

from trip_finder.obs.context import clear_context, request_id_var
from trip_finder.obs.logger import log_event
from trip_finder.obs.metrics import record_timing, inc_counter


class ObservabilityMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope: dict, receive: Callable, send: Callable[[dict], Any]):
        if scope.get("type") != "http":
            return await self.app(scope, receive, send)

        clear_context()
        req_id = str(uuid.uuid4())
        request_id_var.set(req_id)
        method = scope.get("method", "")
        path = scope.get("path", "")
        # Collapse session ids so routes stay low-cardinality metric labels
        route = _route_template(path)
        start = time.monotonic()
        status_code = 500

        async def send_wrapper(message: dict):
            nonlocal status_code
            if message.get("type") == "http.response.start":
                status_code = int(message.get("status", 200))
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", req_id.encode()))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            elapsed_ms = (time.monotonic() - start) * 1000.0
            record_timing("request_latency_ms", elapsed_ms, {"route": route})
            inc_counter("requests_total", {"route": route, "status": str(status_code)})
            log_event(
                "request",
                method=method,
                route=route,
                status=status_code,
                ms_total=round(elapsed_ms, 2),
            )


def _route_template(path: str) -> str:
    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "sessions":
        parts[1] = "{id}"
    return "/" + "/".join(parts)
