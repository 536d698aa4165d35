"""Pushgateway 指标发布工具。

每个指标族对应一个 Pushgateway job，Gauge 名与 job 名相同；
地址、统计窗口等维度通过 `grouping_key` 区分。API 返回的数值多为字符串，
在推送前转换为 float，转换失败时记录日志并跳过该条指标。
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Mapping, Optional

from prometheus_client import (  # type: ignore[import-not-found]
    CollectorRegistry,
    Gauge,
    push_to_gateway,
)

logger = logging.getLogger(__name__)

JOB_SPEED = "aleo_prover_speed"
JOB_TOTAL_SPEED = "aleo_prover_total_speed"
JOB_REWARD = "aleo_prover_reward"
JOB_TOTAL_REWARD = "aleo_prover_total_reward"
JOB_LATEST_HEIGHT = "aleo_prover_latest_height"
JOB_LATEST_BLOCK = "aleo_prover_latest_block"

CLUSTER_GROUP: Mapping[str, str] = {"module": "cluster"}


def parse_float(value: Any, what: str = "value") -> Optional[float]:
    """把 API 返回值转换为有限 float。

    参数:
        value: 原始值，通常为数字字符串，也接受 int/float。
        what: 字段名，仅用于日志。

    返回值:
        float | None: 转换成功返回数值；空值、非数字、NaN/inf 返回 None。

    副作用:
        转换失败时输出 warning 日志。
    """

    if isinstance(value, bool) or value is None:
        logger.warning("parse %s %r failed: not a number", what, value)
        return None
    try:
        out = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError) as exc:
        logger.warning("parse %s %r failed: %s", what, value, exc)
        return None
    if not math.isfinite(out):
        logger.warning("parse %s %r failed: not finite", what, value)
        return None
    return out


def build_registry(name: str, value: float) -> CollectorRegistry:
    """构建只含一个 Gauge 的 `CollectorRegistry`。

    参数:
        name: 指标名（同时作为 job 名）。
        value: 指标值。

    返回值:
        CollectorRegistry: 已填充数据的注册表，可用于推送。
    """

    reg = CollectorRegistry()
    g = Gauge(name, name, registry=reg)
    g.set(float(value))
    return reg


def push_gauge(
    gateway_url: str,
    job: str,
    value: float,
    grouping_key: Optional[Mapping[str, str]] = None,
    *,
    dry_run: bool = False,
) -> bool:
    """向 Pushgateway 推送单个 Gauge。

    参数:
        gateway_url: Pushgateway 地址。
        job: Job 名称，同时作为指标名。
        value: 指标值。
        grouping_key: 分组标签，例如 {"module": "cluster", "addr": ...}。
        dry_run: 若为 True，仅记录日志不推送。

    返回值:
        bool: True 表示推送成功；dry-run 或推送失败返回 False。

    副作用:
        网络请求；异常被记录并吞掉，不会中断拉取循环。
    """

    grouping: Dict[str, str] = dict(grouping_key or {})
    if dry_run:
        logger.info("dry-run: skip push %s=%s %s", job, value, grouping)
        return False
    try:
        reg = build_registry(job, value)
        push_to_gateway(gateway_url, job=job, registry=reg, grouping_key=grouping)
    except Exception as exc:  # noqa: BLE001
        logger.error("push prometheus %s failed: %s", gateway_url, exc)
        return False
    logger.debug("pushed %s=%s %s", job, value, grouping)
    return True


def push_speed(
    addr: str, duration: int, speed: Any, *, gateway_url: str, dry_run: bool = False
) -> bool:
    """推送单个地址在某统计窗口内的算力。"""

    val = parse_float(speed, "speed")
    if val is None:
        return False
    grouping = dict(CLUSTER_GROUP, addr=addr, duration=str(duration))
    return push_gauge(gateway_url, JOB_SPEED, val, grouping, dry_run=dry_run)


def push_total_speed(
    duration: int, speed: Any, *, gateway_url: str, dry_run: bool = False
) -> bool:
    """推送某统计窗口内所有地址的总算力。"""

    val = parse_float(speed, "total speed")
    if val is None:
        return False
    return push_gauge(
        gateway_url, JOB_TOTAL_SPEED, val, {"duration": str(duration)}, dry_run=dry_run
    )


def push_reward(
    addr: str, reward: Any, *, gateway_url: str, dry_run: bool = False
) -> bool:
    """推送单个地址的累计奖励。"""

    val = parse_float(reward, "reward")
    if val is None:
        return False
    grouping = dict(CLUSTER_GROUP, addr=addr)
    return push_gauge(gateway_url, JOB_REWARD, val, grouping, dry_run=dry_run)


def push_total_reward(reward: Any, *, gateway_url: str, dry_run: bool = False) -> bool:
    """推送全部地址的奖励合计（无分组标签）。"""

    val = parse_float(reward, "total reward")
    if val is None:
        return False
    return push_gauge(gateway_url, JOB_TOTAL_REWARD, val, dry_run=dry_run)


def push_height(
    addr: str, height: int, *, gateway_url: str, dry_run: bool = False
) -> bool:
    """推送单个地址最近一次出块高度。"""

    grouping = dict(CLUSTER_GROUP, addr=addr)
    return push_gauge(
        gateway_url, JOB_LATEST_HEIGHT, float(height), grouping, dry_run=dry_run
    )


def push_block(
    height: int,
    proof_target: Any,
    coinbase_reward: Any,
    *,
    gateway_url: str,
    dry_run: bool = False,
) -> int:
    """推送最新区块的高度、proof target 与 coinbase 奖励。

    三个序列共用 job `aleo_prover_latest_block`，以 `type` 标签区分
    （height/proof/reward）。每个序列独立解析与推送，某一项解析失败
    不影响其余两项。

    参数:
        height: 区块高度。
        proof_target: proof target（字符串）。
        coinbase_reward: coinbase 奖励（字符串）。
        gateway_url: Pushgateway 地址。
        dry_run: 若为 True，仅记录日志不推送。

    返回值:
        int: 成功推送的序列数（0-3）。

    副作用:
        最多 3 次网络请求。
    """

    series = {
        "height": float(height),
        "proof": parse_float(proof_target, "proof"),
        "reward": parse_float(coinbase_reward, "reward"),
    }
    pushed = 0
    for kind, val in series.items():
        if val is None:
            continue
        if push_gauge(
            gateway_url, JOB_LATEST_BLOCK, val, {"type": kind}, dry_run=dry_run
        ):
            pushed += 1
    return pushed
