"""HTTP adapters over the point-of-sale service."""
from flask import request

from pos.exceptions import ValidationError


def get_json_body() -> dict:
    """Return the request's JSON object or raise ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data
