import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Tuple


DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_PORT = 3001
# Used when gas estimation reverts (commonly: sender already voted). The wallet
# still gets a transaction to sign and surfaces the real revert on confirmation.
FALLBACK_GAS_LIMIT = 300000

VOTING_ABI: List[dict] = [
    {
        "inputs": [{"internalType": "string[]", "name": "proposalNames", "type": "string[]"}],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "inputs": [],
        "name": "getProposals",
        "outputs": [
            {
                "components": [
                    {"internalType": "string", "name": "name", "type": "string"},
                    {"internalType": "uint256", "name": "voteCount", "type": "uint256"},
                ],
                "internalType": "struct Voting.Proposal[]",
                "name": "",
                "type": "tuple[]",
            }
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "name": "proposals",
        "outputs": [
            {"internalType": "string", "name": "name", "type": "string"},
            {"internalType": "uint256", "name": "voteCount", "type": "uint256"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "proposal", "type": "uint256"}],
        "name": "vote",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "address", "name": "", "type": "address"}],
        "name": "voters",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def _load_abi() -> List[dict]:
    raw = os.getenv("CONTRACT_ABI", "").strip()
    if raw:
        return json.loads(raw)
    path = os.getenv("CONTRACT_ABI_PATH", "").strip()
    if path:
        payload: Any = json.loads(Path(path).expanduser().read_text())
        # Hardhat/Truffle artifacts wrap the ABI.
        if isinstance(payload, dict) and "abi" in payload:
            return payload["abi"]
        return payload
    return VOTING_ABI


def _parse_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


@dataclass(frozen=True)
class RelayConfig:
    """Connection settings for one relay instance."""

    contract_address: str
    rpc_url: str = DEFAULT_RPC_URL
    abi: List[dict] = field(default_factory=lambda: list(VOTING_ABI))
    fallback_gas_limit: int = FALLBACK_GAS_LIMIT
    rpc_timeout: Optional[float] = None
    cors_origins: Tuple[str, ...] = ("*",)

    @classmethod
    def from_env(cls) -> "RelayConfig":
        contract_address = os.getenv("CONTRACT_ADDRESS", "").strip()
        if not contract_address:
            raise ValueError("CONTRACT_ADDRESS environment variable is required")

        raw_timeout = os.getenv("RELAY_RPC_TIMEOUT", "").strip()
        return cls(
            contract_address=contract_address,
            rpc_url=os.getenv("RPC_URL", DEFAULT_RPC_URL),
            abi=_load_abi(),
            fallback_gas_limit=int(os.getenv("FALLBACK_GAS_LIMIT", str(FALLBACK_GAS_LIMIT))),
            rpc_timeout=float(raw_timeout) if raw_timeout else None,
            cors_origins=_parse_origins(os.getenv("RELAY_CORS_ORIGINS", "*")),
        )
