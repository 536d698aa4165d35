"""测试全局配置与公共夹具。

将 `src` 目录加入 `sys.path`，以便在未打包安装时可直接导入包；
HTTP 模拟使用 `requests-mock` 插件提供的 `requests_mock` fixture。
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from aleo_prover_monitor.config import MonitorSettings  # noqa: E402

API = "http://api.test"
GATEWAY = "http://pushgw:9091"
ADDRS = ["aleo1aaa", "aleo1bbb"]


@pytest.fixture
def settings() -> MonitorSettings:
    """指向测试地址、仅含两个统计窗口的配置。"""

    return MonitorSettings(
        api_base_url=API,
        pushgateway_url=GATEWAY,
        durations=[900, 3600],
        addresses=list(ADDRS),
        interval_minutes=1,
    )


@pytest.fixture
def pushed(monkeypatch: pytest.MonkeyPatch) -> List[Dict[str, Any]]:
    """替换 `push_to_gateway`，记录每次推送的参数与 Gauge 值。

    返回值:
        list: 每项形如 {"url", "job", "grouping_key", "value"}。
    """

    import aleo_prover_monitor.metrics.pushgateway as pg

    calls: List[Dict[str, Any]] = []

    def fake_push(url: str, job: str, registry, grouping_key):
        calls.append(
            {
                "url": url,
                "job": job,
                "grouping_key": dict(grouping_key),
                "value": registry.get_sample_value(job),
            }
        )

    monkeypatch.setattr(pg, "push_to_gateway", fake_push)
    return calls
