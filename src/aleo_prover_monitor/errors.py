"""异常类型。"""

from __future__ import annotations


class MonitorError(Exception):
    """监控程序异常基类。"""


class ConfigError(MonitorError):
    """配置缺失或不合法。"""


class ApiRequestError(MonitorError):
    """Prover API 请求失败（网络、状态码、JSON 或 Schema 错误）。"""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
