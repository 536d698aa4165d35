"""HTTP JSON 请求工具测试。"""

from __future__ import annotations

import pytest
import requests

from aleo_prover_monitor.clients.http import http_get_json, http_post_json
from aleo_prover_monitor.errors import ApiRequestError

URL = "http://example.com/api"


def test_post_json_sends_body_and_header(requests_mock):
    """POST 请求体应为 JSON 且带 Content-Type 头。"""

    requests_mock.post(URL, json={"ok": True})
    body = http_post_json(URL, {"address": ["a"]}, headers={"X-Test": "1"})
    assert body == {"ok": True}
    req = requests_mock.last_request
    assert req.json() == {"address": ["a"]}
    assert req.headers["Content-Type"] == "application/json"
    assert req.headers["X-Test"] == "1"


def test_get_json_ok(requests_mock):
    requests_mock.get(URL, json={"hello": "world"})
    assert http_get_json(URL) == {"hello": "world"}


def test_http_error_status_raises(requests_mock):
    requests_mock.get(URL, status_code=502)
    with pytest.raises(ApiRequestError) as ei:
        http_get_json(URL)
    assert "502" in str(ei.value)
    assert ei.value.url == URL


def test_non_json_body_raises(requests_mock):
    requests_mock.post(URL, text="<html>oops</html>")
    with pytest.raises(ApiRequestError):
        http_post_json(URL, {})


def test_connection_error_wrapped(requests_mock):
    requests_mock.post(URL, exc=requests.exceptions.ConnectTimeout)
    with pytest.raises(ApiRequestError):
        http_post_json(URL, {})
