# utils/payload.py
from flask import request


def json_object() -> dict:
    """Request body as a JSON object; an empty body counts as {}."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object.")
    return data
