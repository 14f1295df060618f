import threading
from typing import List, Optional

import pytest

from relay.config import RelayConfig
from voteflow.models import PreparedTransaction, Proposal
from voteflow.wallet import USER_REJECTED, WalletError

TEST_CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
TEST_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TEST_PRIV_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_RELAY_URL = "http://relay.test"


@pytest.fixture
def relay_config():
    return RelayConfig(contract_address=TEST_CONTRACT, rpc_url="http://127.0.0.1:8545")


class FakeRelay:
    """In-memory relay mirroring a consistent contract state."""

    def __init__(self, proposals: Optional[List[Proposal]] = None):
        self.proposals = list(proposals or [Proposal("A", 3), Proposal("B", 5)])
        self.voters = set()
        self.prepare_calls = []
        self.prepare_error: Optional[Exception] = None
        self.list_error: Optional[Exception] = None
        self.prepare_entered = threading.Event()
        self.prepare_release: Optional[threading.Event] = None

    def list_proposals(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.proposals)

    def has_voted(self, address):
        return address in self.voters

    def prepare_vote(self, proposal_index, from_address):
        self.prepare_calls.append((proposal_index, from_address))
        self.prepare_entered.set()
        if self.prepare_release is not None:
            self.prepare_release.wait(timeout=5)
        if self.prepare_error is not None:
            raise self.prepare_error
        return PreparedTransaction(to=TEST_CONTRACT, data=f"0xvote{proposal_index}", gas=300000)

    def record_vote(self, proposal_index, from_address):
        self.voters.add(from_address)
        p = self.proposals[proposal_index]
        self.proposals[proposal_index] = Proposal(p.name, p.vote_count + 1)


class FakeWallet:
    def __init__(self, relay: FakeRelay, account: str = TEST_ACCOUNT, authorized: bool = False):
        self.relay = relay
        self.account = account
        self.authorized = authorized
        self.reject_connect = False
        self.reject_signature = False
        self.confirm_error: Optional[Exception] = None
        self.sent = []

    def accounts(self):
        return [self.account] if self.authorized else []

    def request_accounts(self):
        if self.reject_connect:
            raise WalletError("User rejected the request.", code=USER_REJECTED)
        self.authorized = True
        return [self.account]

    def send_transaction(self, tx):
        if self.reject_signature:
            raise WalletError("User denied transaction signature.", code=USER_REJECTED)
        self.sent.append(tx)
        return "0x" + "ab" * 32

    def wait_for_confirmation(self, tx_hash):
        if self.confirm_error is not None:
            raise self.confirm_error
        index = int(self.sent[-1].data.replace("0xvote", ""))
        self.relay.record_vote(index, self.account)
        return {"status": 1, "transactionHash": tx_hash}


@pytest.fixture
def fake_relay():
    return FakeRelay()


@pytest.fixture
def fake_wallet(fake_relay):
    return FakeWallet(fake_relay)


