from __future__ import annotations

import json
from unittest import mock

from chirpy.responses import ErrorResponse, respond_with_error, respond_with_json


def test_respond_with_json_encodes_models() -> None:
    response = respond_with_json(201, ErrorResponse(error="nope"))
    assert response.status_code == 201
    assert response.headers["content-type"] == "application/json"
    assert json.loads(response.body) == {"error": "nope"}


def test_respond_with_json_reports_unserializable_payload() -> None:
    response = respond_with_json(200, {"value": object()})
    assert response.status_code == 500
    payload = json.loads(response.body)
    assert payload["error"].startswith("Error marshalling JSON: ")


def test_respond_with_error_falls_back_to_plain_text() -> None:
    with mock.patch("chirpy.responses._encode", side_effect=TypeError("boom")):
        response = respond_with_error(400, "Chirp is too long")
    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.body == b"Error marshalling JSON: boom"
