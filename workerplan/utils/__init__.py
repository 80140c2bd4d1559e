"""Utility functions and helpers for the workerplan application."""
from typing import Any

from ..config import Config


def _is_sensitive(key: str) -> bool:
    return any(redact_key.lower() in key.lower() for redact_key in Config.REDACT_KEYS)


def redact_sensitive_data(data: Any) -> Any:
    """Recursively redact sensitive data from dictionaries, lists and env strings.

    ``KEY=VALUE`` strings whose key looks sensitive keep their key and lose
    their value.

    Args:
        data: Input data that might contain sensitive information

    Returns:
        Data with sensitive values redacted
    """
    if isinstance(data, dict):
        return {
            k: "[REDACTED]" if _is_sensitive(str(k)) else redact_sensitive_data(v)
            for k, v in data.items()
        }
    elif isinstance(data, (list, tuple)):
        return [redact_sensitive_data(item) for item in data]
    elif isinstance(data, str) and '=' in data:
        key = data.split('=', 1)[0]
        if _is_sensitive(key):
            return f"{key}=[REDACTED]"
    return data
