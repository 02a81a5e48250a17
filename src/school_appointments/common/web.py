from __future__ import annotations

from typing import Any

from flask import jsonify, request


def request_data() -> dict:
    """JSON body when present, else the submitted form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def request_list(data: dict, key: str) -> list:
    if not isinstance(request.get_json(silent=True), dict):
        return request.form.getlist(key)
    value = data.get(key)
    if isinstance(value, str):
        return [value]
    return list(value or [])


def ok(message: str = "", status: int = 200, **data: Any):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(data)
    return jsonify(body), status
