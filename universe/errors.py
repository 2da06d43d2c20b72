from __future__ import annotations

import json
from typing import Any, Dict, List, Tuple

INVALID_INPUT = "Invalid input."


def _field_errors(body: bytes) -> Dict[str, str]:
    try:
        detail = json.loads(body.decode("utf-8")).get("detail")
    except (ValueError, AttributeError):
        return {}
    if not isinstance(detail, list):
        return {}

    errors: Dict[str, str] = {}
    for item in detail:
        if not isinstance(item, dict):
            continue
        loc = item.get("loc") or []
        # FastAPI locations look like ["body", "<field>"].
        if len(loc) >= 2 and isinstance(loc[-1], str):
            errors.setdefault(loc[-1], str(item.get("msg") or INVALID_INPUT))
    return errors


class ValidationNormalizeMiddleware:
    """Turn FastAPI 422 responses into 400 with the house rejection body."""

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: Dict[str, Any], receive: Any, send: Any) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        status_code = 500
        headers: List[Tuple[bytes, bytes]] = []
        body_chunks: List[bytes] = []

        async def send_wrapper(message: Dict[str, Any]) -> None:
            nonlocal status_code, headers
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
                headers = list(message.get("headers", []))
                if status_code != 422:
                    await send(message)
                return

            if status_code != 422:
                await send(message)
                return

            body_chunks.append(message.get("body", b"") or b"")
            if message.get("more_body"):
                return

            payload = json.dumps(
                {
                    "status": "rejected",
                    "error": INVALID_INPUT,
                    "field_errors": _field_errors(b"".join(body_chunks)),
                }
            ).encode("utf-8")
            filtered = [
                (key, value)
                for key, value in headers
                if key.lower() not in {b"content-length", b"content-type"}
            ]
            filtered.append((b"content-type", b"application/json"))
            filtered.append((b"content-length", str(len(payload)).encode("latin-1")))
            await send(
                {"type": "http.response.start", "status": 400, "headers": filtered}
            )
            await send({"type": "http.response.body", "body": payload})

        await self.app(scope, receive, send_wrapper)
