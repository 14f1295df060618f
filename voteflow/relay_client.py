import logging
from typing import Any, List, Optional

import requests

from voteflow.models import PreparedTransaction, Proposal, VotingStats

logger = logging.getLogger(__name__)

DEFAULT_RELAY_ENDPOINT = "http://localhost:3001"


class RelayError(Exception):
    """The relay answered with an error, or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RelayClient:
    """
    Client for the voting relay's JSON surface.
    """

    def __init__(self, base_url: str = DEFAULT_RELAY_ENDPOINT, *, timeout_s: float = 10.0) -> None:
        if not base_url:
            raise ValueError("Relay URL cannot be empty")
        self.base_url = str(base_url).rstrip("/")
        self.timeout_s = max(0.1, float(timeout_s))
        self._session = requests.Session()

    @staticmethod
    def _response_detail(r: Any) -> Any:
        try:
            payload = r.json() if getattr(r, "content", None) else {}
        except Exception:
            payload = None
        if isinstance(payload, dict):
            return payload.get("error") or payload.get("detail") or payload
        if payload is not None:
            return payload
        return (getattr(r, "text", "") or "").strip() or None

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self._session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error("Relay %s %s failed: %s", method, path, e)
            raise RelayError(str(e)) from e
        if r.status_code != 200:
            detail = self._response_detail(r)
            logger.error("Relay %s %s failed: HTTP %s (%s)", method, path, r.status_code, detail)
            raise RelayError(str(detail or f"HTTP {r.status_code}"), status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            logger.error("Relay %s %s returned a non-JSON body: %s", method, path, e)
            raise RelayError(f"Invalid JSON from relay: {e}", status_code=r.status_code) from e

    @staticmethod
    def _malformed(path: str, e: Exception) -> RelayError:
        logger.error("Relay %s returned an unexpected payload: %r", path, e)
        return RelayError(f"Unexpected response from relay {path}: {e!r}")

    def list_proposals(self) -> List[Proposal]:
        payload = self._request("GET", "/proposals")
        try:
            proposals = [
                Proposal(name=str(item["name"]), vote_count=int(item["voteCount"]))
                for item in payload or []
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise self._malformed("/proposals", e) from e
        logger.debug("Relay returned %d proposals", len(proposals))
        return proposals

    def has_voted(self, address: str) -> bool:
        payload = self._request("GET", f"/hasVoted/{address}")
        if not isinstance(payload, dict) or "hasVoted" not in payload:
            raise self._malformed("/hasVoted", ValueError(payload))
        return bool(payload["hasVoted"])

    def prepare_vote(self, proposal_index: int, from_address: str) -> PreparedTransaction:
        payload = self._request(
            "POST",
            "/vote",
            json={"proposalId": int(proposal_index), "fromAddress": from_address},
        )
        try:
            return PreparedTransaction(to=payload["to"], data=payload["data"], gas=int(payload["gas"]))
        except (KeyError, TypeError, ValueError) as e:
            raise self._malformed("/vote", e) from e

    def voting_stats(self) -> VotingStats:
        payload = self._request("GET", "/votingStats")
        try:
            return VotingStats(
                total_votes=int(payload["totalVotes"]),
                highest_vote=int(payload["highestVote"]),
                leading_proposal=payload.get("leadingProposal"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise self._malformed("/votingStats", e) from e
