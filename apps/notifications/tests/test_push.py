from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests
from django.test import override_settings

from apps.notifications.push import PushError, coerce_data, send_multicast, send_to_token


def test_data_values_are_coerced_to_strings():
    assert coerce_data({"matchId": 12, "urgent": True, "ratio": 2.0, "score": 0.5, "note": None}) == {
        "matchId": "12",
        "urgent": "true",
        "ratio": "2",
        "score": "0.5",
        "note": "null",
    }
    assert coerce_data(None) == {}


@override_settings(PUSH_BACKEND="log")
def test_empty_token_list_is_a_no_op():
    with patch("apps.notifications.push._send_via_log") as backend:
        result = send_multicast([], "title", "body")
    backend.assert_not_called()
    assert result.success_count == 0


@override_settings(PUSH_BACKEND="log")
def test_log_backend_accepts_every_token():
    result = send_multicast(["a", "b", "a", ""], "title", "body")
    assert result.success_count == 2


@override_settings(PUSH_BACKEND="http", PUSH_GATEWAY_URL="https://push.example.com/", PUSH_GATEWAY_TOKEN="secret")
def test_http_backend_posts_multicast_payload():
    response = MagicMock()
    response.json.return_value = {"successCount": 1, "failureCount": 1}
    with patch("apps.notifications.push.requests.post", return_value=response) as mocked_post:
        result = send_multicast(["t1", "t2"], "הודעה חדשה", "היי!", {"matchId": 5})

    url = mocked_post.call_args.args[0]
    kwargs = mocked_post.call_args.kwargs
    assert url == "https://push.example.com/send"
    assert kwargs["headers"] == {"Authorization": "Bearer secret"}
    assert kwargs["json"] == {
        "tokens": ["t1", "t2"],
        "notification": {"title": "הודעה חדשה", "body": "היי!"},
        "data": {"matchId": "5"},
    }
    assert (result.success_count, result.failure_count) == (1, 1)


@override_settings(PUSH_BACKEND="http", PUSH_GATEWAY_URL="https://push.example.com")
def test_http_errors_become_push_errors():
    with patch("apps.notifications.push.requests.post", side_effect=requests.ConnectionError("down")):
        with pytest.raises(PushError):
            send_to_token("t1", "title", "body")


@override_settings(PUSH_BACKEND="http", PUSH_GATEWAY_URL="")
def test_http_backend_requires_gateway_url():
    with pytest.raises(PushError):
        send_to_token("t1", "title", "body")


@override_settings(PUSH_BACKEND="carrier-pigeon")
def test_unknown_backend_is_rejected():
    with pytest.raises(PushError):
        send_to_token("t1", "title", "body")
