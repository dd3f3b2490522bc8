# blogapi/utils/responses.py
from typing import Any, Dict, Optional

from flask import jsonify


def api_response(data: Optional[Dict[str, Any]] = None, message: str = "OK", status: int = 200):
    """Success envelope: ``{"success": true, "message": ..., "data": ...}``."""
    return jsonify({
        "success": True,
        "message": message,
        "data": data if data is not None else {},
    }), status


def error_response(message: str, status: int, error_code: str, details: Optional[Any] = None):
    """Failure envelope used by the centralized error responders."""
    body = {
        "success": False,
        "message": message,
        "error_code": error_code,
    }
    if details is not None:
        body["details"] = details
    return jsonify(body), status
