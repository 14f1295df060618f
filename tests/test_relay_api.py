"""
HTTP tests for the voting relay.
"""
import pytest
from fastapi.testclient import TestClient

from relay.contract import (
    PreparedTransaction,
    Proposal,
    UpstreamUnavailable,
    compute_voting_stats,
)
from relay.main import create_app
from tests.conftest import TEST_ACCOUNT, TEST_CONTRACT


class FakeContract:
    contract_address = TEST_CONTRACT

    def __init__(self, config):
        self.config = config
        self.proposals = [Proposal("Alpha", 3), Proposal("Beta", 2**70)]
        self.voters = {TEST_ACCOUNT}
        self.error = None
        self.prepared = []

    def _check(self):
        if self.error is not None:
            raise self.error

    def list_proposals(self):
        self._check()
        return list(self.proposals)

    def has_voted(self, address):
        self._check()
        return address in self.voters

    def prepare_vote(self, proposal_index, from_address):
        self._check()
        self.prepared.append((proposal_index, from_address))
        return PreparedTransaction(to=TEST_CONTRACT, data="0x0121b93f" + format(proposal_index, "064x"), gas=300000)

    def voting_stats(self):
        return compute_voting_stats(self.list_proposals())


@pytest.fixture
def contract(relay_config):
    return FakeContract(relay_config)


@pytest.fixture
def client(relay_config, contract):
    app = create_app(relay_config, contract=contract)
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert "timestamp" in body


class TestProposals:
    def test_counts_are_decimal_strings(self, client):
        response = client.get("/proposals")
        assert response.status_code == 200
        assert response.json() == [
            {"name": "Alpha", "voteCount": "3"},
            {"name": "Beta", "voteCount": str(2**70)},
        ]

    def test_empty_list(self, client, contract):
        contract.proposals = []
        response = client.get("/proposals")
        assert response.status_code == 200
        assert response.json() == []

    def test_upstream_failure_is_500_with_error(self, client, contract):
        contract.error = UpstreamUnavailable("could not connect to node")
        response = client.get("/proposals")
        assert response.status_code == 500
        assert response.json() == {"error": "could not connect to node"}


class TestHasVoted:
    def test_voter(self, client):
        response = client.get(f"/hasVoted/{TEST_ACCOUNT}")
        assert response.status_code == 200
        assert response.json() == {"hasVoted": True}

    def test_non_voter(self, client):
        response = client.get("/hasVoted/0x0000000000000000000000000000000000000001")
        assert response.json() == {"hasVoted": False}

    def test_failure(self, client, contract):
        contract.error = UpstreamUnavailable("invalid address")
        response = client.get("/hasVoted/nope")
        assert response.status_code == 500
        assert response.json()["error"] == "invalid address"


class TestPrepareVote:
    def test_returns_unsigned_transaction(self, client, contract):
        response = client.post("/vote", json={"proposalId": 1, "fromAddress": TEST_ACCOUNT})
        assert response.status_code == 200
        body = response.json()
        assert body["to"] == TEST_CONTRACT
        assert body["data"].startswith("0x0121b93f")
        assert body["gas"] == "300000"
        assert contract.prepared == [(1, TEST_ACCOUNT)]

    def test_does_not_change_state(self, client, contract):
        client.post("/vote", json={"proposalId": 0, "fromAddress": TEST_ACCOUNT})
        assert client.get("/proposals").json()[0]["voteCount"] == "3"

    @pytest.mark.parametrize(
        "payload",
        [
            {"fromAddress": TEST_ACCOUNT},
            {"proposalId": "first", "fromAddress": TEST_ACCOUNT},
            {"proposalId": 0},
        ],
    )
    def test_malformed_body_is_generic_failure(self, client, contract, payload):
        response = client.post("/vote", json=payload)
        assert response.status_code == 500
        assert response.json()["error"]
        assert contract.prepared == []

    def test_failure(self, client, contract):
        contract.error = UpstreamUnavailable("execution reverted")
        response = client.post("/vote", json={"proposalId": 0, "fromAddress": TEST_ACCOUNT})
        assert response.status_code == 500
        assert response.json() == {"error": "execution reverted"}


class TestVotingStats:
    def test_stats(self, client, contract):
        contract.proposals = [Proposal("A", 3), Proposal("B", 5)]
        response = client.get("/votingStats")
        assert response.status_code == 200
        assert response.json() == {"totalVotes": 8, "highestVote": 5, "leadingProposal": "B"}

    def test_empty(self, client, contract):
        contract.proposals = []
        response = client.get("/votingStats")
        assert response.status_code == 200
        assert response.json() == {"totalVotes": 0, "highestVote": 0, "leadingProposal": None}


def test_unexpected_error_is_500_with_error(client, contract):
    contract.error = RuntimeError("boom")
    response = client.get("/proposals")
    assert response.status_code == 500
    assert response.json() == {"error": "boom"}


class TestRequestId:
    def test_generated(self, client):
        response = client.get("/health")
        assert response.headers.get("X-Request-ID")

    def test_echoed(self, client):
        response = client.get("/proposals", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_present_on_errors(self, client, contract):
        contract.error = UpstreamUnavailable("down")
        response = client.get("/proposals", headers={"X-Request-ID": "req-err"})
        assert response.headers["X-Request-ID"] == "req-err"


def test_create_app_requires_contract_address(monkeypatch):
    monkeypatch.delenv("CONTRACT_ADDRESS", raising=False)
    with pytest.raises(ValueError, match="CONTRACT_ADDRESS"):
        create_app()
