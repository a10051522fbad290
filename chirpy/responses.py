"""JSON response helpers shared by the Chirpy routes."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import Response, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

logger = logging.getLogger("chirpy.responses")

JSON_MEDIA_TYPE = "application/json"


class ErrorResponse(BaseModel):
    error: str


def _encode(payload: Any) -> str:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json")
    return json.dumps(payload)


def respond_with_json(code: int, payload: Any) -> Response:
    """Serialize ``payload`` and wrap it in a JSON response with ``code``."""

    try:
        data = _encode(payload)
    except (TypeError, ValueError) as exc:
        return respond_with_error(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Error marshalling JSON: {exc}")
    return Response(content=data, status_code=code, media_type=JSON_MEDIA_TYPE)


def respond_with_error(code: int, message: str) -> Response:
    """Return ``{"error": message}`` with ``code``, or raw text if that cannot be encoded."""

    try:
        data = _encode(ErrorResponse(error=message))
    except (TypeError, ValueError) as exc:
        logger.error("Failed to encode error response: %s", exc)
        return PlainTextResponse(
            f"Error marshalling JSON: {exc}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return Response(content=data, status_code=code, media_type=JSON_MEDIA_TYPE)


__all__ = ["ErrorResponse", "JSON_MEDIA_TYPE", "respond_with_error", "respond_with_json"]
