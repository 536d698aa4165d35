"""Aleo Prover 监控包。

周期性地从 Prover 统计 API 拉取算力、奖励、高度与最新区块信息，
并以 Gauge 指标形式推送到 Prometheus Pushgateway。
"""

__all__ = ["__version__", "get_version"]

__version__ = "0.1.0"


def get_version() -> str:
    """返回当前包版本号。

    返回值:
        str: 版本号字符串，例如 "0.1.0"。
    副作用:
        无副作用，仅读取内置常量。
    """

    return __version__
