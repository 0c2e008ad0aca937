"""
Shared API response envelope.

Every endpoint answers with the same ``{statusCode, message, data}``
envelope; listings put ``{meta, result}`` inside ``data``, where ``meta``
echoes the caller's ``current`` and ``pageSize`` as sent.
"""

from typing import Any, Dict


def respond(status_code: int, message: str, data: Any = None) -> Dict[str, Any]:
    return {"statusCode": status_code, "message": message, "data": data}


__all__ = ["respond"]
