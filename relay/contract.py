import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from web3 import Web3

from relay.config import RelayConfig

logger = logging.getLogger(__name__)


class UpstreamUnavailable(Exception):
    """The RPC node could not be reached or the contract call reverted."""


@dataclass(frozen=True)
class Proposal:
    name: str
    vote_count: int


@dataclass(frozen=True)
class PreparedTransaction:
    to: str
    data: str
    gas: int


@dataclass(frozen=True)
class VotingStats:
    total_votes: int
    highest_vote: int
    leading_proposal: Optional[str]


def normalize_address(address: Any) -> Any:
    """Checksum well-formed addresses; pass anything else through untouched.

    Browser wallets report lowercase addresses, which web3.py refuses. Input
    that is not an address at all is forwarded so the contract call fails the
    way it would upstream.
    """
    if isinstance(address, str) and Web3.is_address(address):
        return Web3.to_checksum_address(address)
    return address


def _unpack_proposal(entry: Any) -> Tuple[str, int]:
    if isinstance(entry, Mapping):
        return str(entry["name"]), int(entry["voteCount"])
    return str(entry[0]), int(entry[1])


def compute_voting_stats(proposals: List[Proposal]) -> VotingStats:
    if not proposals:
        return VotingStats(total_votes=0, highest_vote=0, leading_proposal=None)
    highest = max(p.vote_count for p in proposals)
    leader = next(p for p in proposals if p.vote_count == highest)
    return VotingStats(
        total_votes=sum(p.vote_count for p in proposals),
        highest_vote=highest,
        leading_proposal=leader.name,
    )


class VotingContract:
    """Read and write-preparation access to the voting contract.

    Holds a single read-only ``Web3`` handle; every operation opens a fresh
    contract binding against it so no per-request state survives.
    """

    def __init__(self, config: RelayConfig, w3: Optional[Web3] = None):
        self.config = config
        if w3 is None:
            request_kwargs = {"timeout": config.rpc_timeout} if config.rpc_timeout else None
            w3 = Web3(Web3.HTTPProvider(config.rpc_url, request_kwargs=request_kwargs))
        self.w3 = w3
        self.contract_address = Web3.to_checksum_address(config.contract_address)

    def _binding(self):
        return self.w3.eth.contract(address=self.contract_address, abi=self.config.abi)

    def list_proposals(self) -> List[Proposal]:
        try:
            raw = self._binding().functions.getProposals().call()
            proposals = [Proposal(*_unpack_proposal(entry)) for entry in raw]
        except Exception as e:
            logger.error("Error fetching proposals: %s", e)
            raise UpstreamUnavailable(str(e)) from e
        logger.debug("Fetched %d proposals", len(proposals))
        return proposals

    def has_voted(self, address: str) -> bool:
        try:
            return bool(self._binding().functions.voters(normalize_address(address)).call())
        except Exception as e:
            logger.error("Error checking voter status for %s: %s", address, e)
            raise UpstreamUnavailable(str(e)) from e

    def prepare_vote(self, proposal_index: int, from_address: str) -> PreparedTransaction:
        try:
            contract = self._binding()
            call = contract.functions.vote(proposal_index)
            data = contract.encode_abi("vote", args=[proposal_index])
        except Exception as e:
            logger.error("Error preparing vote transaction: %s", e)
            raise UpstreamUnavailable(str(e)) from e

        try:
            gas = int(call.estimate_gas({"from": normalize_address(from_address)}))
        except Exception as e:
            # Estimation reverts when the sender already voted; let the wallet
            # try anyway so the real revert reason shows up at confirmation.
            logger.warning(
                "Gas estimation failed for proposal=%s from=%s, using fallback %d: %s",
                proposal_index,
                from_address,
                self.config.fallback_gas_limit,
                e,
            )
            gas = int(self.config.fallback_gas_limit)

        return PreparedTransaction(to=self.contract_address, data=data, gas=gas)

    def voting_stats(self) -> VotingStats:
        return compute_voting_stats(self.list_proposals())
