from __future__ import annotations

from typing import Any, Dict

from flask import request

from ..core.exceptions import ValidationError


def json_body() -> Dict[str, Any]:
    """Return the JSON object body of the current request ({} when empty)."""
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data(cache=True):
            raise ValidationError("Malformed JSON body")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data
