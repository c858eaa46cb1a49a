"""
Readable messages for API error responses.
"""
from typing import Any

AUTH_ERROR_MESSAGES = {
    "invalid-email": "Invalid email address",
    "user-not-found": "No admin account found with this email",
    "wrong-password": "Incorrect password",
    "user-disabled": "This admin account has been disabled",
    "too-many-requests": "Too many failed attempts. Try again later",
    "insufficient-permission": "Admin privileges required",
    "invalid-token": "Your session has expired. Please sign in again",
}


def error_code(result: dict) -> str | None:
    """The auth error code carried by a failed response, if any."""
    data = result.get("data")
    if not isinstance(data, dict):
        return None
    detail = data.get("detail")
    if isinstance(detail, dict):
        return detail.get("code")
    return None


def _detail_message(detail: Any) -> str | None:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict):
        code = detail.get("code")
        return AUTH_ERROR_MESSAGES.get(code) or detail.get("message")
    if isinstance(detail, list):
        # FastAPI validation errors
        messages = []
        for item in detail:
            if isinstance(item, dict):
                location = ".".join(str(part) for part in item.get("loc", [])[1:])
                msg = item.get("msg", "")
                messages.append(f"{location}: {msg}" if location else msg)
        return "; ".join(messages) or None
    return None


def error_message(result: dict, default: str = "Request failed") -> str:
    """Turn an APIClient result into a message for the operator."""
    if result.get("error"):
        return result["error"]

    data = result.get("data")
    if isinstance(data, dict):
        message = _detail_message(data.get("detail"))
        if message:
            return message
        if data.get("raw"):
            return str(data["raw"])

    status = result.get("status")
    return f"{default} (HTTP {status})" if status else default
