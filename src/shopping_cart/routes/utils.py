from typing import Optional

from flask import jsonify
from datetime import datetime, timezone


def success_response(data, message: Optional[str] = None, status: int = 200):
    """Consistent success response envelope."""
    response = {
        "success": True,
        "data": data,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if message:
        response["message"] = message
    return jsonify(response), status


def no_content():
    return "", 204
