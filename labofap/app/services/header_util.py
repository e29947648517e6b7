"""
Alert headers: the UI reads these to show a notification after a request.
"""
from __future__ import annotations

from typing import Dict
from urllib.parse import quote

from labofap.app.config import APP_NAME


def _encode(param: str) -> str:
    # header values must stay latin-1 safe
    return quote(param or "", safe="_-.@:/ ")


def create_alert(message: str, param: str) -> Dict[str, str]:
    return {
        f"X-{APP_NAME}-alert": message,
        f"X-{APP_NAME}-params": _encode(param),
    }


def create_failure_alert(entity_name: str, error_key: str) -> Dict[str, str]:
    return {
        f"X-{APP_NAME}-error": f"error.{error_key}",
        f"X-{APP_NAME}-params": _encode(entity_name),
    }
