"""Enveloppe commune des réponses JSON réussies."""
from typing import Any


def success_response(message: str, data: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return payload
