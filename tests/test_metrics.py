"""Tests for the hit counter and the counting ASGI wrapper."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from chirpy.metrics import FileServerHitsMiddleware, HitCounter, render_metrics_page


def test_counter_increments_and_resets() -> None:
    counter = HitCounter()
    assert counter.value == 0
    assert counter.increment() == 1
    assert counter.increment() == 2
    counter.reset()
    assert counter.value == 0


def test_counter_does_not_lose_concurrent_updates() -> None:
    counter = HitCounter()
    workers = 8
    per_worker = 2000

    def bump() -> None:
        for _ in range(per_worker):
            counter.increment()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        for future in [pool.submit(bump) for _ in range(workers)]:
            future.result()

    assert counter.value == workers * per_worker


def test_middleware_counts_every_request_regardless_of_outcome() -> None:
    counter = HitCounter()
    inner = FastAPI()

    @inner.get("/ok")
    async def ok() -> PlainTextResponse:
        return PlainTextResponse("fine")

    outer = FastAPI()
    outer.mount("/app", FileServerHitsMiddleware(inner, counter))

    with TestClient(outer) as client:
        assert client.get("/app/ok").status_code == 200
        assert client.get("/app/missing").status_code == 404
        assert client.post("/app/ok").status_code == 405

    assert counter.value == 3


def test_render_metrics_page_embeds_count() -> None:
    markup = render_metrics_page(42)
    assert "<h1>Welcome, Chirpy Admin</h1>" in markup
    assert "<p>Chirpy has been visited 42 times!</p>" in markup
    assert markup.startswith("<html>")
    assert markup.endswith("</html>")
