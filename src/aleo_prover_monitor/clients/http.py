"""HTTP JSON 请求工具。

对 `requests` 的 GET/POST 做薄封装：统一超时、状态码检查与 JSON 解析，
所有失败都转换为 :class:`ApiRequestError`。
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import requests  # type: ignore[import-untyped]

from ..errors import ApiRequestError

JSON_HEADERS: Mapping[str, str] = {"Content-Type": "application/json"}


def _decode(url: str, resp: requests.Response) -> Any:
    """检查状态码并解析 JSON 响应体。

    参数:
        url: 请求 URL（用于错误信息）。
        resp: `requests` 响应对象。

    返回值:
        Any: 解析后的 JSON 数据。

    副作用:
        状态码 >= 400 或响应体不是 JSON 时抛出 ApiRequestError。
    """

    if resp.status_code >= 400:
        raise ApiRequestError(url, f"status {resp.status_code}")
    try:
        return resp.json()
    except ValueError as exc:
        raise ApiRequestError(url, f"invalid JSON body: {exc}") from exc


def http_get_json(
    url: str,
    timeout: float = 10.0,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """发送 GET 请求并返回解析后的 JSON。

    参数:
        url: 目标 URL。
        timeout: 超时时间（秒）。
        headers: 额外请求头。

    返回值:
        Any: 解析后的 JSON 数据。

    副作用:
        网络请求；失败抛出 ApiRequestError。
    """

    try:
        resp = requests.get(url, timeout=timeout, headers=headers)
    except requests.RequestException as exc:
        raise ApiRequestError(url, str(exc)) from exc
    return _decode(url, resp)


def http_post_json(
    url: str,
    payload: Mapping[str, Any],
    timeout: float = 10.0,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """以 JSON 请求体发送 POST 请求并返回解析后的 JSON。

    参数:
        url: 目标 URL。
        payload: 请求体，序列化为 JSON。
        timeout: 超时时间（秒）。
        headers: 额外请求头，会与 `Content-Type: application/json` 合并。

    返回值:
        Any: 解析后的 JSON 数据。

    副作用:
        网络请求；失败抛出 ApiRequestError。
    """

    merged = dict(JSON_HEADERS)
    merged.update(headers or {})
    try:
        resp = requests.post(url, json=dict(payload), timeout=timeout, headers=merged)
    except requests.RequestException as exc:
        raise ApiRequestError(url, str(exc)) from exc
    return _decode(url, resp)
