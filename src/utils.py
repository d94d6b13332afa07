import json
from typing import Any, Optional, Tuple


def safe_str(obj: Any) -> str:
    try:
        return str(obj)
    except Exception:
        return ""


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """
    Mask a secret for display, keeping only the first `visible` chars.
    Short secrets are fully masked.
    """
    if not value:
        return ""
    if len(value) <= visible * 2:
        return "***MASKED***"
    return f"{value[:visible]}***MASKED***"


def truncate(text: str, limit: int = 300) -> str:
    text = text or ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def parse_json_body(text: str) -> Optional[Any]:
    """Best-effort JSON parse. Returns None if the text is not JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def extract_error(body: Any, fallback: str = "") -> Tuple[Optional[str], Optional[str]]:
    """
    Pull (message, error_type) out of an Airtable error payload.

    Airtable uses two shapes:
      {"error": {"type": "AUTHENTICATION_REQUIRED", "message": "..."}}
      {"error": "NOT_FOUND"}
    """
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            err_type = err.get("type")
            message = err.get("message") or err_type or fallback
            return safe_str(message) or None, safe_str(err_type) if err_type else None
        if isinstance(err, str) and err.strip():
            return err.strip(), err.strip()
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip(), None
    fallback = (fallback or "").strip()
    return (truncate(fallback) or None), None
