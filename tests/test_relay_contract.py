"""
Tests for the contract binding behind the relay.
"""
from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.providers import BaseProvider

from relay.config import RelayConfig, VOTING_ABI
from relay.contract import (
    Proposal,
    UpstreamUnavailable,
    VotingContract,
    compute_voting_stats,
    normalize_address,
)
from tests.conftest import TEST_ACCOUNT, TEST_CONTRACT


class OfflineProvider(BaseProvider):
    """Every RPC fails; ABI encoding still works without a node."""

    def make_request(self, method, params):
        raise ConnectionError(f"offline: {method}")

    def is_connected(self, show_traceback: bool = False) -> bool:
        return False


def make_contract(relay_config):
    w3 = MagicMock()
    binding = w3.eth.contract.return_value
    return VotingContract(relay_config, w3=w3), w3, binding


class TestListProposals:
    def test_preserves_order_names_and_counts(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.functions.getProposals.return_value.call.return_value = [
            ("Alpha", 3),
            ("Beta", 0),
            ("Gamma", 2**200),
        ]

        proposals = contract.list_proposals()

        assert [p.name for p in proposals] == ["Alpha", "Beta", "Gamma"]
        assert [p.vote_count for p in proposals] == [3, 0, 2**200]

    def test_accepts_mapping_structs(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.functions.getProposals.return_value.call.return_value = [
            {"name": "A", "voteCount": 7},
        ]
        assert contract.list_proposals() == [Proposal("A", 7)]

    def test_opens_fresh_binding_per_call(self, relay_config):
        contract, w3, binding = make_contract(relay_config)
        binding.functions.getProposals.return_value.call.return_value = []

        contract.list_proposals()
        contract.list_proposals()

        assert w3.eth.contract.call_count == 2
        w3.eth.contract.assert_called_with(address=TEST_CONTRACT, abi=relay_config.abi)

    def test_call_failure_is_upstream_unavailable(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.functions.getProposals.return_value.call.side_effect = ConnectionError("node down")

        with pytest.raises(UpstreamUnavailable, match="node down"):
            contract.list_proposals()


class TestHasVoted:
    def test_lowercase_address_is_checksummed(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.functions.voters.return_value.call.return_value = True

        assert contract.has_voted(TEST_ACCOUNT.lower()) is True
        binding.functions.voters.assert_called_once_with(TEST_ACCOUNT)

    def test_malformed_address_is_forwarded(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.functions.voters.side_effect = ValueError("invalid address 'nope'")

        with pytest.raises(UpstreamUnavailable, match="invalid address"):
            contract.has_voted("nope")
        binding.functions.voters.assert_called_once_with("nope")


class TestPrepareVote:
    def test_uses_gas_estimate(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.encode_abi.return_value = "0xdeadbeef"
        binding.functions.vote.return_value.estimate_gas.return_value = 51234

        prepared = contract.prepare_vote(1, TEST_ACCOUNT.lower())

        assert prepared.to == TEST_CONTRACT
        assert prepared.data == "0xdeadbeef"
        assert prepared.gas == 51234
        binding.functions.vote.return_value.estimate_gas.assert_called_once_with({"from": TEST_ACCOUNT})

    @pytest.mark.parametrize(
        "error",
        [
            ValueError("execution reverted: Already voted."),
            ConnectionError("node down"),
            RuntimeError("anything"),
        ],
    )
    def test_estimation_failure_falls_back(self, relay_config, error):
        contract, _, binding = make_contract(relay_config)
        binding.encode_abi.return_value = "0xdeadbeef"
        binding.functions.vote.return_value.estimate_gas.side_effect = error

        prepared = contract.prepare_vote(0, TEST_ACCOUNT)

        assert prepared.gas == 300000

    def test_configured_fallback_limit(self):
        config = RelayConfig(contract_address=TEST_CONTRACT, fallback_gas_limit=450000)
        w3 = MagicMock()
        w3.eth.contract.return_value.encode_abi.return_value = "0x00"
        w3.eth.contract.return_value.functions.vote.return_value.estimate_gas.side_effect = ValueError("revert")

        assert VotingContract(config, w3=w3).prepare_vote(0, TEST_ACCOUNT).gas == 450000

    def test_encoding_failure_is_upstream_unavailable(self, relay_config):
        contract, _, binding = make_contract(relay_config)
        binding.encode_abi.side_effect = TypeError("Could not identify the intended function")

        with pytest.raises(UpstreamUnavailable):
            contract.prepare_vote("not-a-number", TEST_ACCOUNT)

    def test_encodes_vote_call_offline(self, relay_config):
        contract = VotingContract(relay_config, w3=Web3(OfflineProvider()))

        prepared = contract.prepare_vote(2, TEST_ACCOUNT)

        selector = Web3.to_hex(Web3.keccak(text="vote(uint256)")[:4])
        assert prepared.data.lower() == selector + format(2, "064x")
        assert prepared.gas == 300000


class TestVotingStats:
    def test_totals_and_leader(self):
        stats = compute_voting_stats([Proposal("A", 3), Proposal("B", 5)])
        assert (stats.total_votes, stats.highest_vote, stats.leading_proposal) == (8, 5, "B")

    def test_first_proposal_wins_a_tie(self):
        stats = compute_voting_stats([Proposal("A", 4), Proposal("B", 4)])
        assert stats.leading_proposal == "A"

    def test_empty(self):
        stats = compute_voting_stats([])
        assert (stats.total_votes, stats.highest_vote, stats.leading_proposal) == (0, 0, None)


def test_normalize_address_passes_through_non_addresses():
    assert normalize_address("nope") == "nope"
    assert normalize_address(42) == 42
    assert normalize_address(TEST_ACCOUNT.lower()) == TEST_ACCOUNT


def test_default_abi_exposes_voting_methods():
    names = {entry.get("name") for entry in VOTING_ABI}
    assert {"getProposals", "voters", "vote"} <= names
