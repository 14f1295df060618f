import json

import pytest

from relay.config import DEFAULT_RPC_URL, FALLBACK_GAS_LIMIT, VOTING_ABI, RelayConfig
from tests.conftest import TEST_CONTRACT


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "CONTRACT_ADDRESS",
        "RPC_URL",
        "CONTRACT_ABI",
        "CONTRACT_ABI_PATH",
        "FALLBACK_GAS_LIMIT",
        "RELAY_RPC_TIMEOUT",
        "RELAY_CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_missing_contract_address():
    with pytest.raises(ValueError, match="CONTRACT_ADDRESS"):
        RelayConfig.from_env()


def test_defaults(monkeypatch):
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT)
    config = RelayConfig.from_env()
    assert config.contract_address == TEST_CONTRACT
    assert config.rpc_url == DEFAULT_RPC_URL
    assert config.abi == VOTING_ABI
    assert config.fallback_gas_limit == FALLBACK_GAS_LIMIT
    assert config.rpc_timeout is None
    assert config.cors_origins == ("*",)


def test_overrides(monkeypatch):
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT)
    monkeypatch.setenv("RPC_URL", "http://node:8545")
    monkeypatch.setenv("FALLBACK_GAS_LIMIT", "500000")
    monkeypatch.setenv("RELAY_RPC_TIMEOUT", "7.5")
    monkeypatch.setenv("RELAY_CORS_ORIGINS", "http://a.test, http://b.test,")
    config = RelayConfig.from_env()
    assert config.rpc_url == "http://node:8545"
    assert config.fallback_gas_limit == 500000
    assert config.rpc_timeout == 7.5
    assert config.cors_origins == ("http://a.test", "http://b.test")


def test_abi_from_artifact_file(monkeypatch, tmp_path):
    abi = [{"type": "function", "name": "vote", "inputs": [], "outputs": []}]
    artifact = tmp_path / "Voting.json"
    artifact.write_text(json.dumps({"contractName": "Voting", "abi": abi}))
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT)
    monkeypatch.setenv("CONTRACT_ABI_PATH", str(artifact))
    assert RelayConfig.from_env().abi == abi


def test_abi_from_bare_file(monkeypatch, tmp_path):
    abi = [{"type": "function", "name": "getProposals", "inputs": [], "outputs": []}]
    path = tmp_path / "abi.json"
    path.write_text(json.dumps(abi))
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT)
    monkeypatch.setenv("CONTRACT_ABI_PATH", str(path))
    assert RelayConfig.from_env().abi == abi


def test_inline_abi_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("CONTRACT_ADDRESS", TEST_CONTRACT)
    monkeypatch.setenv("CONTRACT_ABI", "[]")
    monkeypatch.setenv("CONTRACT_ABI_PATH", str(tmp_path / "missing.json"))
    assert RelayConfig.from_env().abi == []
