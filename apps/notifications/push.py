from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class PushError(Exception):
    """The push gateway refused or could not be reached."""


@dataclass
class PushMessage:
    title: str
    body: str
    data: Dict[str, str] = field(default_factory=dict)


@dataclass
class PushResult:
    success_count: int
    failure_count: int = 0


def _stringify(value: Any) -> str:
    # device payloads only carry strings; render scalars the way the mobile clients expect
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coerce_data(data: Mapping[str, Any] | None) -> Dict[str, str]:
    return {str(key): _stringify(value) for key, value in (data or {}).items()}


def _send_via_log(tokens: List[str], message: PushMessage) -> PushResult:
    logger.info("[push] Would send %r to %d device(s)", message.title, len(tokens))
    return PushResult(success_count=len(tokens))


def _send_via_http(tokens: List[str], message: PushMessage) -> PushResult:
    base_url = getattr(settings, "PUSH_GATEWAY_URL", "") or ""
    if not base_url:
        raise PushError("PUSH_GATEWAY_URL is not configured.")
    headers: dict[str, str] = {}
    token = getattr(settings, "PUSH_GATEWAY_TOKEN", "") or ""
    if token:
        headers["Authorization"] = f"Bearer {token}"
    payload = {
        "tokens": tokens,
        "notification": {"title": message.title, "body": message.body},
        "data": message.data,
    }
    try:
        response = requests.post(
            base_url.rstrip("/") + "/send",
            json=payload,
            headers=headers,
            timeout=getattr(settings, "PUSH_TIMEOUT_SECONDS", 5),
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise PushError(str(exc)) from exc
    try:
        body = response.json()
    except ValueError:
        body = {}
    success = int(body.get("successCount", len(tokens)))
    return PushResult(success_count=success, failure_count=int(body.get("failureCount", len(tokens) - success)))


_BACKENDS = {
    "log": _send_via_log,
    "http": _send_via_http,
}


def send_multicast(tokens: Iterable[str], title: str, body: str, data: Mapping[str, Any] | None = None) -> PushResult:
    """Deliver one notification to every token. Empty token lists are a no-op."""
    token_list = [token for token in dict.fromkeys(tokens) if token]
    if not token_list:
        return PushResult(success_count=0)
    backend_name = getattr(settings, "PUSH_BACKEND", "log")
    try:
        backend = _BACKENDS[backend_name]
    except KeyError:
        raise PushError(f"Unknown push backend {backend_name!r}.") from None
    return backend(token_list, PushMessage(title=title, body=body, data=coerce_data(data)))


def send_to_token(token: str, title: str, body: str, data: Mapping[str, Any] | None = None) -> PushResult:
    return send_multicast([token], title, body, data)
