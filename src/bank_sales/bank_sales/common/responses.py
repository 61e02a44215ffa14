"""Uniform JSON envelope used by every controller.

Success: ``{"success": true, "message": ..., "data": ...}``
Failure: ``{"success": false, "error": {"message", "code", "details"?}}``
"""
from __future__ import annotations

import math
from typing import Any, Optional

from flask import jsonify


def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status_code


def created_response(data: Any, message: str = "Resource created successfully"):
    return success_response(data, message, 201)


def paginated_response(items: list, *, page: int, limit: int, total: int, message: str = "Success"):
    total_pages = math.ceil(total / limit) if limit else 0
    return success_response(
        {
            "items": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": total_pages,
                "hasNextPage": page < total_pages,
                "hasPrevPage": page > 1,
            },
        },
        message,
    )


def error_response(message: str, code: str, status_code: int, details: Optional[Any] = None):
    error: dict = {"message": message, "code": code}
    if details:
        error["details"] = details
    return jsonify({"success": False, "error": error}), status_code
