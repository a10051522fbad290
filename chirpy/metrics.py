"""File server hit counting and the admin metrics page."""

from __future__ import annotations

import threading

from starlette.types import ASGIApp, Receive, Scope, Send

_METRICS_TEMPLATE = """<html>
  <body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
  </body>
</html>"""


class HitCounter:
    """Process-lifetime counter shared between concurrent requests."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        with self._lock:
            return self._value

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0


class FileServerHitsMiddleware:
    """ASGI wrapper that counts every HTTP request before delegating."""

    def __init__(self, app: ASGIApp, counter: HitCounter) -> None:
        self.app = app
        self.counter = counter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            self.counter.increment()
        await self.app(scope, receive, send)


def render_metrics_page(hits: int) -> str:
    return _METRICS_TEMPLATE.format(hits=hits)


__all__ = ["FileServerHitsMiddleware", "HitCounter", "render_metrics_page"]
