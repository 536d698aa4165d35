"""命令行入口。

子命令:
- `run`：按间隔循环拉取并推送；
- `once`：只执行一轮，打印 JSON 报告；
- `check-config`：校验配置与地址列表，打印生效配置。

示例:
    aleo-prover-monitor run --api http://localhost:8088 --addr-file addresses.txt
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import typer

from .config import (
    MonitorSettings,
    load_settings,
    parse_address_list,
    resolve_addresses,
)
from .errors import ConfigError
from .logs import setup_logging
from .orchestrators import poll

app = typer.Typer(help="Aleo Prover 指标拉取与 Pushgateway 推送")

ConfigOpt = typer.Option(None, "--config", help="YAML 配置文件路径")
ApiOpt = typer.Option(
    None, "--api", envvar="PROVER_API_URL", help="Prover API 基础 URL"
)
GatewayOpt = typer.Option(
    None, "--pushgateway", envvar="PROM_PUSHGATEWAY_URL", help="Pushgateway 地址"
)
IntervalOpt = typer.Option(None, "--interval", help="拉取间隔（分钟）")
AddrFileOpt = typer.Option(None, "--addr-file", help="地址文件（每行一个地址）")
AddressesOpt = typer.Option(None, "--addresses", help="逗号分隔的地址列表")
TimeoutOpt = typer.Option(None, "--timeout", help="HTTP 请求超时（秒）")
DryRunOpt = typer.Option(False, "--dry-run", help="仅拉取，不推送指标")
LogLevelOpt = typer.Option(None, "--log-level", help="日志级别")


def _prepare(
    config: Optional[str],
    api: Optional[str],
    pushgateway: Optional[str],
    interval: Optional[float],
    addr_file: Optional[str],
    addresses: Optional[str],
    timeout: Optional[float],
    dry_run: bool,
    log_level: Optional[str],
) -> Tuple[MonitorSettings, List[str]]:
    """合并配置文件与命令行选项，初始化日志并解析地址。

    返回值:
        (settings, addresses): 生效配置与去重后的地址列表。

    副作用:
        读取配置/地址文件；配置错误转换为 `typer.BadParameter`。
    """

    overrides: Dict[str, Any] = {
        "api_base_url": api,
        "pushgateway_url": pushgateway,
        "interval_minutes": interval,
        "address_file": addr_file,
        "request_timeout_seconds": timeout,
        "log_level": log_level,
        # 仅在显式开启时覆盖配置文件
        "dry_run": True if dry_run else None,
    }
    if addresses:
        overrides["addresses"] = parse_address_list(addresses)
    try:
        settings = load_settings(Path(config) if config else None, **overrides)
        setup_logging(settings.log_level)
        addrs = resolve_addresses(settings)
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
    return settings, addrs


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """根命令：未指定子命令时打印帮助。"""

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command()
def run(
    config: Optional[str] = ConfigOpt,
    api: Optional[str] = ApiOpt,
    pushgateway: Optional[str] = GatewayOpt,
    interval: Optional[float] = IntervalOpt,
    addr_file: Optional[str] = AddrFileOpt,
    addresses: Optional[str] = AddressesOpt,
    timeout: Optional[float] = TimeoutOpt,
    dry_run: bool = DryRunOpt,
    log_level: Optional[str] = LogLevelOpt,
    max_cycles: Optional[int] = typer.Option(
        None, "--max-cycles", help="最大轮数（缺省无限循环）"
    ),
) -> None:
    """按间隔循环拉取 Prover 统计并推送到 Pushgateway。

    参数:
        config: YAML 配置文件路径。
        max_cycles: 最大轮数，便于一次性任务或测试；缺省无限循环。
        其余选项覆盖配置文件中的同名字段。

    副作用:
        持续的网络请求与休眠。
    """

    settings, addrs = _prepare(
        config, api, pushgateway, interval, addr_file, addresses, timeout, dry_run, log_level
    )
    poll.run_forever(settings, addrs, max_cycles=max_cycles)


@app.command()
def once(
    config: Optional[str] = ConfigOpt,
    api: Optional[str] = ApiOpt,
    pushgateway: Optional[str] = GatewayOpt,
    interval: Optional[float] = IntervalOpt,
    addr_file: Optional[str] = AddrFileOpt,
    addresses: Optional[str] = AddressesOpt,
    timeout: Optional[float] = TimeoutOpt,
    dry_run: bool = DryRunOpt,
    log_level: Optional[str] = LogLevelOpt,
) -> None:
    """执行一轮拉取并以 JSON 打印报告。"""

    settings, addrs = _prepare(
        config, api, pushgateway, interval, addr_file, addresses, timeout, dry_run, log_level
    )
    report = poll.poll_once(settings, addrs)
    typer.echo(_json.dumps(report.to_dict(), ensure_ascii=False))


@app.command("check-config")
def check_config(
    config: Optional[str] = ConfigOpt,
    api: Optional[str] = ApiOpt,
    pushgateway: Optional[str] = GatewayOpt,
    interval: Optional[float] = IntervalOpt,
    addr_file: Optional[str] = AddrFileOpt,
    addresses: Optional[str] = AddressesOpt,
    timeout: Optional[float] = TimeoutOpt,
    dry_run: bool = DryRunOpt,
    log_level: Optional[str] = LogLevelOpt,
) -> None:
    """校验配置与地址列表，打印生效配置。

    副作用:
        读取文件系统；不发起网络请求。
    """

    settings, addrs = _prepare(
        config, api, pushgateway, interval, addr_file, addresses, timeout, dry_run, log_level
    )
    typer.echo(
        _json.dumps(
            {"settings": settings.model_dump(), "address_count": len(addrs)},
            ensure_ascii=False,
        )
    )


def main() -> None:
    """CLI 入口包装。"""

    app()


if __name__ == "__main__":
    main()
