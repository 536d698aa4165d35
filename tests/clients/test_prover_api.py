"""Prover API 客户端测试（requests-mock）。"""

from __future__ import annotations

import pytest

from aleo_prover_monitor.clients.prover_api import (
    HEIGHT_PATH,
    LATEST_BLOCK_PATH,
    REWARD_PATH,
    SPEED_PATH,
    ProverApiClient,
)
from aleo_prover_monitor.errors import ApiRequestError

BASE = "http://api.test"


@pytest.fixture
def client() -> ProverApiClient:
    return ProverApiClient(base_url=BASE + "/", timeout=1.0)


def test_prover_speed(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + SPEED_PATH,
        json={
            "code": 0,
            "message": "ok",
            "data": {
                "list": [
                    {"address": "aleo1a", "speed": "12.5"},
                    {"address": "aleo1b", "speed": "0"},
                ],
                "total": "12.5",
            },
        },
    )
    resp = client.prover_speed(["aleo1a", "aleo1b"], 900)
    assert requests_mock.last_request.json() == {
        "address": ["aleo1a", "aleo1b"],
        "duration": 900,
    }
    assert [i.address for i in resp.data.items] == ["aleo1a", "aleo1b"]
    assert resp.data.items[0].speed == "12.5"
    assert resp.data.total == "12.5"


def test_prover_reward_ignores_extra_keys(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + REWARD_PATH,
        json={
            "code": 0,
            "data": {
                "list": [{"address": "aleo1a", "total_reward": "100", "rank": 3}],
                "total": "100",
                "page": 1,
            },
        },
    )
    resp = client.prover_reward(["aleo1a"])
    assert requests_mock.last_request.json() == {"address": ["aleo1a"]}
    assert resp.data.items[0].total_reward == "100"


def test_prover_latest_height(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + HEIGHT_PATH,
        json={"code": 0, "data": [{"address": "aleo1a", "height": 123456}]},
    )
    resp = client.prover_latest_height(["aleo1a"])
    assert resp.data[0].height == 123456


def test_latest_block_uses_get(requests_mock, client: ProverApiClient):
    requests_mock.get(
        BASE + LATEST_BLOCK_PATH,
        json={
            "code": 0,
            "data": {
                "height": 500,
                "proof_target": "1024",
                "coinbase_reward": "2.5",
            },
        },
    )
    resp = client.latest_block()
    assert requests_mock.last_request.method == "GET"
    assert resp.data.height == 500
    assert resp.data.proof_target == "1024"


def test_empty_data_defaults(requests_mock, client: ProverApiClient):
    requests_mock.post(BASE + SPEED_PATH, json={"code": 1, "message": "no data"})
    resp = client.prover_speed(["aleo1a"], 60)
    assert resp.data.items == [] and resp.data.total == ""


def test_schema_mismatch_raises(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + HEIGHT_PATH,
        json={"code": 0, "data": [{"address": "aleo1a", "height": "not-int"}]},
    )
    with pytest.raises(ApiRequestError) as ei:
        client.prover_latest_height(["aleo1a"])
    assert ei.value.url == BASE + HEIGHT_PATH


def test_null_total_keeps_entries(requests_mock, client: ProverApiClient):
    """`total: null` 视为空串，列表条目照常解析。"""

    requests_mock.post(
        BASE + SPEED_PATH,
        json={
            "code": 0,
            "data": {"list": [{"address": "aleo1a", "speed": "10"}], "total": None},
        },
    )
    resp = client.prover_speed(["aleo1a"], 900)
    assert [i.speed for i in resp.data.items] == ["10"]
    assert resp.data.total == ""


def test_null_list_is_empty(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + REWARD_PATH, json={"code": 0, "data": {"list": None, "total": "7"}}
    )
    resp = client.prover_reward(["aleo1a"])
    assert resp.data.items == [] and resp.data.total == "7"


def test_null_data_containers(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + HEIGHT_PATH, json={"code": 0, "message": None, "data": None}
    )
    requests_mock.get(BASE + LATEST_BLOCK_PATH, json={"code": 0, "data": None})
    assert client.prover_latest_height(["aleo1a"]).data == []
    block = client.latest_block()
    assert block.data.height == 0 and block.data.proof_target == ""


def test_null_item_value_becomes_empty(requests_mock, client: ProverApiClient):
    requests_mock.post(
        BASE + REWARD_PATH,
        json={"data": {"list": [{"address": "aleo1a", "total_reward": None}]}},
    )
    resp = client.prover_reward(["aleo1a"])
    assert resp.data.items[0].total_reward == ""
