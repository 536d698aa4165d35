"""日志初始化。"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(log_level: str = "INFO") -> None:
    """配置根 logger 输出到标准错误（标准输出留给 JSON 结果）。

    参数:
        log_level: 日志级别名（DEBUG/INFO/WARNING/...），未知名称回退为 INFO。

    副作用:
        移除根 logger 上已有的 handler 并安装新的 StreamHandler。
    """

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    for h in root_logger.handlers[:]:
        root_logger.removeHandler(h)
    root_logger.addHandler(handler)
