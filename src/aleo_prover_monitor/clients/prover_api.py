"""Prover 统计 API 客户端。

封装四个接口（算力、奖励、最新高度、最新区块），把响应解析为 Pydantic
模型。数值类字段保留 API 原始的字符串形式，转换在推送阶段完成；
后端以 `null` 表示“无数据”，解析时视同缺省值。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..errors import ApiRequestError
from .http import http_get_json, http_post_json

SPEED_PATH = "/api/v1/provers/prover_speed_list"
REWARD_PATH = "/api/v1/provers/prover_reward_list"
HEIGHT_PATH = "/api/v1/provers/prover_latest_height"
LATEST_BLOCK_PATH = "/api/v1/chain/latest_block"


class _ApiModel(BaseModel):
    """响应模型基类：JSON `null` 按字段缺省值（空串、空列表、0）处理。"""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class SpeedItem(_ApiModel):
    address: str = ""
    speed: str = ""


class SpeedData(_ApiModel):
    items: List[SpeedItem] = Field(default_factory=list, alias="list")
    total: str = ""


class SpeedResponse(_ApiModel):
    """`prover_speed_list` 响应。"""

    code: int = 0
    message: str = ""
    data: SpeedData = Field(default_factory=SpeedData)


class RewardItem(_ApiModel):
    address: str = ""
    total_reward: str = ""


class RewardData(_ApiModel):
    items: List[RewardItem] = Field(default_factory=list, alias="list")
    total: str = ""


class RewardResponse(_ApiModel):
    """`prover_reward_list` 响应。"""

    code: int = 0
    message: str = ""
    data: RewardData = Field(default_factory=RewardData)


class HeightItem(_ApiModel):
    address: str = ""
    height: int = 0


class HeightResponse(_ApiModel):
    """`prover_latest_height` 响应，`data` 直接是数组。"""

    code: int = 0
    message: str = ""
    data: List[HeightItem] = Field(default_factory=list)


class BlockData(_ApiModel):
    height: int = 0
    proof_target: str = ""
    coinbase_reward: str = ""


class BlockResponse(_ApiModel):
    """`chain/latest_block` 响应。"""

    code: int = 0
    message: str = ""
    data: BlockData = Field(default_factory=BlockData)


M = TypeVar("M", bound=BaseModel)


def _parse(url: str, model: Type[M], body: Any) -> M:
    """按模型校验响应体，失败时抛出 ApiRequestError。"""

    try:
        return model.model_validate(body)
    except ValidationError as exc:
        raise ApiRequestError(url, f"unexpected response schema: {exc}") from exc


@dataclass
class ProverApiClient:
    """Prover 统计 API 客户端。

    参数:
        base_url: API 基础 URL，例如 `http://localhost:8088`。
        timeout: 单次请求超时（秒）。
        headers: 附加请求头（可选）。

    副作用:
        无；网络请求在方法调用时发生。
    """

    base_url: str
    timeout: float = 10.0
    headers: Optional[Dict[str, str]] = None

    def url(self, path: str) -> str:
        return self.base_url.rstrip("/") + path

    def _post(self, path: str, payload: Dict[str, Any], model: Type[M]) -> M:
        url = self.url(path)
        body = http_post_json(url, payload, timeout=self.timeout, headers=self.headers)
        return _parse(url, model, body)

    def prover_speed(self, addresses: Sequence[str], duration: int) -> SpeedResponse:
        """查询各地址在指定统计窗口内的算力。

        参数:
            addresses: Prover 地址列表。
            duration: 统计窗口（秒）。

        返回值:
            SpeedResponse: 每个地址的算力与总算力（字符串）。

        副作用:
            POST 请求；失败抛出 ApiRequestError。
        """

        payload = {"address": list(addresses), "duration": int(duration)}
        return self._post(SPEED_PATH, payload, SpeedResponse)

    def prover_reward(self, addresses: Sequence[str]) -> RewardResponse:
        """查询各地址的累计奖励与合计。"""

        return self._post(REWARD_PATH, {"address": list(addresses)}, RewardResponse)

    def prover_latest_height(self, addresses: Sequence[str]) -> HeightResponse:
        """查询各地址最近一次提交 solution 的区块高度。"""

        return self._post(HEIGHT_PATH, {"address": list(addresses)}, HeightResponse)

    def latest_block(self) -> BlockResponse:
        """查询链上最新区块（高度、proof target、coinbase 奖励）。

        返回值:
            BlockResponse: 最新区块信息。

        副作用:
            GET 请求；失败抛出 ApiRequestError。
        """

        url = self.url(LATEST_BLOCK_PATH)
        body = http_get_json(url, timeout=self.timeout, headers=self.headers)
        return _parse(url, BlockResponse, body)
