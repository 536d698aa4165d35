"""配置 Schema 与加载器。

使用 Pydantic 定义监控程序的运行参数，支持从 YAML 文件加载并叠加
命令行覆盖项；地址列表可来自配置文件内联、逗号分隔字符串或地址文件。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

DEFAULT_DURATIONS: List[int] = [900, 3600, 43200, 86400]


class MonitorSettings(BaseModel):
    """监控运行参数（禁止未知键）。

    参数:
        api_base_url: Prover API 基础 URL。
        pushgateway_url: Pushgateway 地址。
        interval_minutes: 两轮拉取之间的间隔（分钟）。
        durations: 算力统计窗口（秒），每个窗口单独请求一次。
        address_file: 地址文件路径（每行一个地址）。
        addresses: 内联地址列表。
        request_timeout_seconds: 单次 HTTP 请求超时（秒）。
        dry_run: 为 True 时只拉取不推送。
        log_level: 日志级别。
    """

    model_config = ConfigDict(extra="forbid")

    api_base_url: str = "http://localhost:8088"
    pushgateway_url: str = "http://pushgateway:9091"
    interval_minutes: float = Field(default=5, gt=0)
    durations: List[int] = Field(default_factory=lambda: list(DEFAULT_DURATIONS))
    address_file: Optional[str] = None
    addresses: List[str] = Field(default_factory=list)
    request_timeout_seconds: float = Field(default=10, gt=0)
    dry_run: bool = False
    log_level: str = "INFO"

    @field_validator("api_base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("durations")
    @classmethod
    def _positive_durations(cls, v: List[int]) -> List[int]:
        if any(d <= 0 for d in v):
            raise ValueError("durations must be positive seconds")
        return v

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60


def _read_yaml(path: Path) -> Dict[str, Any]:
    """读取 YAML 文件为字典。

    参数:
        path: YAML 文件路径。

    返回值:
        dict: 解析后的字典（空文件返回空字典）。

    副作用:
        文件 IO；读取或解析失败抛出 ConfigError。
    """

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping")
    return dict(data)


def load_settings(path: Optional[Path] = None, **overrides: Any) -> MonitorSettings:
    """加载配置文件并叠加覆盖项。

    参数:
        path: YAML 配置路径；为 None 时仅使用默认值与覆盖项。
        overrides: 覆盖字段，值为 None 的项被忽略（便于直接透传 CLI 选项）。

    返回值:
        MonitorSettings: 校验通过的配置对象。

    副作用:
        文件 IO；校验失败抛出 ConfigError。
    """

    data: Dict[str, Any] = _read_yaml(path) if path is not None else {}
    for key, val in overrides.items():
        if val is not None:
            data[key] = val
    try:
        return MonitorSettings(**data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def read_addresses(path: Path) -> List[str]:
    """从文件读取地址列表。

    每行一个地址；去除首尾空白，跳过空行与 `#` 开头的注释行。

    参数:
        path: 地址文件路径。

    返回值:
        List[str]: 地址列表（保持文件顺序）。

    副作用:
        文件 IO；文件不可读时抛出 ConfigError。
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read address file {path}: {exc}") from exc
    out: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        out.append(line)
    return out


def parse_address_list(text: str) -> List[str]:
    """解析逗号分隔的地址字符串，丢弃空项。"""

    return [a.strip() for a in text.split(",") if a.strip()]


def resolve_addresses(settings: MonitorSettings) -> List[str]:
    """合并内联地址与地址文件，按首次出现去重。

    参数:
        settings: 监控配置。

    返回值:
        List[str]: 去重后的地址列表。

    副作用:
        可能读取地址文件；结果为空时抛出 ConfigError。
    """

    merged = list(settings.addresses)
    if settings.address_file:
        merged.extend(read_addresses(Path(settings.address_file)))
    out = list(dict.fromkeys(merged))
    if not out:
        raise ConfigError("no prover addresses configured")
    return out
