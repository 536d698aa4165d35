"""拉取-推送编排。

一轮拉取依次执行：各统计窗口的算力 → 奖励 → 最新高度 → 最新区块。
任一接口请求失败只跳过该分段，其余分段照常执行；每轮结束后按配置
的间隔休眠。
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from ..clients.prover_api import ProverApiClient
from ..config import MonitorSettings
from ..errors import ApiRequestError
from ..metrics import pushgateway as pg

logger = logging.getLogger(__name__)


@dataclass
class SectionResult:
    """单个分段的执行结果。

    属性:
        ok: 接口请求是否成功。
        pushed: 成功推送的指标条数。
        error: 请求失败时的错误信息。
    """

    ok: bool = False
    pushed: int = 0
    error: Optional[str] = None


@dataclass
class CycleReport:
    """一轮拉取的汇总，分段键如 `speed_900`、`reward`、`height`、`block`。"""

    sections: Dict[str, SectionResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return bool(self.sections) and all(s.ok for s in self.sections.values())

    @property
    def pushed(self) -> int:
        return sum(s.pushed for s in self.sections.values())

    def to_dict(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "pushed": self.pushed,
            "sections": {k: asdict(v) for k, v in self.sections.items()},
        }


def client_from_settings(settings: MonitorSettings) -> ProverApiClient:
    """按配置构造 API 客户端。

    参数:
        settings: 监控配置（读取 API 地址与请求超时）。

    返回值:
        ProverApiClient: 未发起任何请求的客户端实例。
    """

    return ProverApiClient(
        base_url=settings.api_base_url, timeout=settings.request_timeout_seconds
    )


def _poll_speed(
    client: ProverApiClient,
    settings: MonitorSettings,
    addresses: Sequence[str],
    duration: int,
) -> int:
    resp = client.prover_speed(addresses, duration)
    gw, dry = settings.pushgateway_url, settings.dry_run
    pushed = 0
    for item in resp.data.items:
        pushed += pg.push_speed(
            item.address, duration, item.speed, gateway_url=gw, dry_run=dry
        )
    pushed += pg.push_total_speed(
        duration, resp.data.total, gateway_url=gw, dry_run=dry
    )
    return pushed


def _poll_reward(
    client: ProverApiClient, settings: MonitorSettings, addresses: Sequence[str]
) -> int:
    resp = client.prover_reward(addresses)
    gw, dry = settings.pushgateway_url, settings.dry_run
    pushed = 0
    for item in resp.data.items:
        pushed += pg.push_reward(
            item.address, item.total_reward, gateway_url=gw, dry_run=dry
        )
    pushed += pg.push_total_reward(resp.data.total, gateway_url=gw, dry_run=dry)
    return pushed


def _poll_height(
    client: ProverApiClient, settings: MonitorSettings, addresses: Sequence[str]
) -> int:
    resp = client.prover_latest_height(addresses)
    pushed = 0
    for item in resp.data:
        pushed += pg.push_height(
            item.address,
            item.height,
            gateway_url=settings.pushgateway_url,
            dry_run=settings.dry_run,
        )
    return pushed


def _poll_block(client: ProverApiClient, settings: MonitorSettings) -> int:
    resp = client.latest_block()
    return pg.push_block(
        resp.data.height,
        resp.data.proof_target,
        resp.data.coinbase_reward,
        gateway_url=settings.pushgateway_url,
        dry_run=settings.dry_run,
    )


def _run_section(name: str, fn: Callable[[], int]) -> SectionResult:
    """执行单个分段，把请求失败转换为结果对象。"""

    try:
        pushed = fn()
    except ApiRequestError as exc:
        logger.error("%s request failed: %s", name, exc)
        return SectionResult(ok=False, error=str(exc))
    logger.info("%s request ok, pushed %d metrics", name, pushed)
    return SectionResult(ok=True, pushed=pushed)


def poll_once(
    settings: MonitorSettings,
    addresses: Sequence[str],
    *,
    client: Optional[ProverApiClient] = None,
) -> CycleReport:
    """执行一轮拉取并推送所有指标。

    参数:
        settings: 监控配置（API 地址、Pushgateway、统计窗口、dry-run）。
        addresses: Prover 地址列表。
        client: 可注入的 API 客户端，缺省按配置构造。

    返回值:
        CycleReport: 各分段的请求结果与推送条数。

    副作用:
        对 Prover API 与 Pushgateway 发起网络请求。
    """

    api = client or client_from_settings(settings)
    report = CycleReport()
    for d in settings.durations:
        report.sections[f"speed_{d}"] = _run_section(
            f"speed[{d}s]",
            lambda d=d: _poll_speed(api, settings, addresses, d),
        )
    report.sections["reward"] = _run_section(
        "reward", lambda: _poll_reward(api, settings, addresses)
    )
    report.sections["height"] = _run_section(
        "height", lambda: _poll_height(api, settings, addresses)
    )
    report.sections["block"] = _run_section(
        "block", lambda: _poll_block(api, settings)
    )
    return report


def run_forever(
    settings: MonitorSettings,
    addresses: Sequence[str],
    *,
    max_cycles: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
    client: Optional[ProverApiClient] = None,
) -> List[CycleReport]:
    """循环执行 `poll_once`，每轮结束后休眠 `interval_minutes` 分钟。

    参数:
        settings: 监控配置。
        addresses: Prover 地址列表。
        max_cycles: 最大轮数；None 表示无限循环。
        sleep: 休眠函数（测试中可替换）。
        client: 可注入的 API 客户端。

    返回值:
        List[CycleReport]: 各轮报告（仅在 max_cycles 有限时返回）。

    副作用:
        网络请求与 `sleep` 调用。
    """

    api = client or client_from_settings(settings)
    reports: List[CycleReport] = []
    cycle = 0
    while max_cycles is None or cycle < max_cycles:
        cycle += 1
        report = poll_once(settings, addresses, client=api)
        logger.info(
            "cycle %d done: ok=%s pushed=%d", cycle, report.ok, report.pushed
        )
        if max_cycles is not None:
            reports.append(report)
        sleep(settings.interval_seconds)
    return reports
