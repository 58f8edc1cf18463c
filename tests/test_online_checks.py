import json

import pytest
import requests

from conftest import TEST_API_KEY
from chaincfg.utils import common
from chaincfg.utils.compiler import check_compiler_version
from chaincfg.utils.custom_exceptions import CompilerError, NodeError
from chaincfg.utils.node_handler import check_network, get_chain_id

RPC_URL = f"https://sepolia.infura.io/v3/{TEST_API_KEY}"


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


@pytest.fixture
def solc_list(monkeypatch):
    calls = []

    def get(url, headers=None, timeout=None):
        calls.append(url)
        return FakeResponse({"releases": {"0.8.18": "solc-linux-amd64-v0.8.18+commit.87f61d96"}})

    monkeypatch.setattr(common.requests, "get", get)
    return calls


def fake_node(monkeypatch, payload, status_code=200):
    requests_sent = []

    def post(url, data=None, headers=None, timeout=None):
        requests_sent.append(json.loads(data))
        return FakeResponse(payload, status_code)

    monkeypatch.setattr(common.requests, "post", post)
    return requests_sent


def test_compiler_version_available(solc_list):
    check_compiler_version("0.8.18", "linux-amd64")
    assert solc_list == ["https://binaries.soliditylang.org/linux-amd64/list.json"]


def test_compiler_version_missing(solc_list):
    with pytest.raises(CompilerError, match='"0.8.99" for "linux-amd64" is not found'):
        check_compiler_version("0.8.99", "linux-amd64")


def test_compiler_list_http_error(monkeypatch):
    monkeypatch.setattr(
        common.requests, "get", lambda url, headers=None, timeout=None: FakeResponse({}, 503)
    )
    with pytest.raises(CompilerError, match="HTTP error occurred"):
        check_compiler_version("0.8.18", "linux-amd64")


def test_compiler_list_not_json(monkeypatch):
    monkeypatch.setattr(
        common.requests,
        "get",
        lambda url, headers=None, timeout=None: FakeResponse(ValueError("<html>")),
    )
    with pytest.raises(CompilerError, match="did not return JSON"):
        check_compiler_version("0.8.18", "linux-amd64")


def test_get_chain_id(monkeypatch):
    sent = fake_node(monkeypatch, {"jsonrpc": "2.0", "id": 1, "result": "0xaa36a7"})
    assert get_chain_id(RPC_URL) == 11155111
    assert sent[0]["method"] == "eth_chainId"


def test_get_chain_id_bad_response(monkeypatch):
    fake_node(monkeypatch, {"jsonrpc": "2.0", "id": 1, "error": {"message": "nope"}})
    with pytest.raises(NodeError, match="Failed to retrieve chain ID"):
        get_chain_id(RPC_URL)


def test_get_chain_id_html_response(monkeypatch):
    fake_node(monkeypatch, requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0))
    with pytest.raises(NodeError, match="not JSON"):
        get_chain_id(RPC_URL)


@pytest.mark.parametrize("result", [None, "latest", 1337])
def test_get_chain_id_result_not_hex(monkeypatch, result):
    fake_node(monkeypatch, {"jsonrpc": "2.0", "id": 1, "result": result})
    with pytest.raises(NodeError, match="Chain ID is not a hex string"):
        get_chain_id(RPC_URL)


def test_get_chain_id_connection_error(monkeypatch):
    def post(url, data=None, headers=None, timeout=None):
        raise requests.exceptions.ConnectionError(
            "HTTPSConnectionPool(host='sepolia.infura.io', port=443): Max retries "
            f"exceeded with url: /v3/{TEST_API_KEY} (Caused by NameResolutionError)"
        )

    monkeypatch.setattr(common.requests, "post", post)
    with pytest.raises(NodeError, match="Connection error occurred") as exc_info:
        get_chain_id(RPC_URL)
    assert TEST_API_KEY not in exc_info.value.message
    assert "url: /***" in exc_info.value.message


def test_unauthorized_node_error_hides_api_key(monkeypatch):
    def post(url, data=None, headers=None, timeout=None):
        response = requests.Response()
        response.status_code = 401
        response.reason = "Unauthorized"
        response.url = url
        return response

    monkeypatch.setattr(common.requests, "post", post)
    with pytest.raises(NodeError, match="401 Client Error") as exc_info:
        check_network("sepolia", {"url": RPC_URL, "chainId": 11155111})
    assert TEST_API_KEY not in exc_info.value.message
    assert "https://sepolia.infura.io/***" in exc_info.value.message


def test_check_network_matches(monkeypatch):
    fake_node(monkeypatch, {"result": "0xaa36a7"})
    check_network("sepolia", {"url": RPC_URL, "chainId": 11155111})


def test_check_network_mismatch(monkeypatch):
    fake_node(monkeypatch, {"result": "0x1"})
    with pytest.raises(NodeError, match="declares chain ID 11155111, the node reports 1"):
        check_network("sepolia", {"url": RPC_URL, "chainId": 11155111})


def test_check_network_without_url_skips_request(monkeypatch):
    sent = fake_node(monkeypatch, {"result": "0x539"})
    check_network("hardhat", {"chainId": 1337})
    assert sent == []


def test_node_logs_hide_api_key(monkeypatch, capsys):
    fake_node(monkeypatch, {"result": "0xaa36a7"})
    get_chain_id(RPC_URL)
    assert TEST_API_KEY not in capsys.readouterr().out
