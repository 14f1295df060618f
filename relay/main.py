import logging
import os
import time
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relay.config import RelayConfig
from relay.contract import UpstreamUnavailable, VotingContract
from relay.schemas import (
    ErrorResponse,
    HasVotedResponse,
    HealthResponse,
    PreparedTransactionResponse,
    ProposalResponse,
    VoteRequest,
    VotingStatsResponse,
)


def _setup_relay_logging() -> None:
    relay_logger = logging.getLogger("relay")
    if getattr(relay_logger, "_configured", False):
        return

    level_name = (os.getenv("RELAY_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    relay_logger.setLevel(level)
    relay_logger.propagate = False

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    relay_logger.addHandler(stream_handler)

    log_file = os.getenv("RELAY_LOG_FILE", "").strip()
    if log_file:
        try:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=int(os.getenv("RELAY_LOG_MAX_BYTES", str(10 * 1024 * 1024))),
                backupCount=int(os.getenv("RELAY_LOG_BACKUP_COUNT", "5")),
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            relay_logger.addHandler(file_handler)
        except Exception:
            relay_logger.exception("Failed to configure RELAY_LOG_FILE=%r", log_file)

    relay_logger._configured = True


_setup_relay_logging()
logger = logging.getLogger(__name__)


ERROR_RESPONSES = {500: {"model": ErrorResponse}}

router = APIRouter()


def get_contract(request: Request) -> VotingContract:
    return request.app.state.contract


@router.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="healthy", timestamp=datetime.now(UTC))


@router.get("/proposals", response_model=List[ProposalResponse], responses=ERROR_RESPONSES)
def get_proposals(contract: VotingContract = Depends(get_contract)):
    return [
        ProposalResponse(name=p.name, voteCount=str(p.vote_count))
        for p in contract.list_proposals()
    ]


@router.get("/hasVoted/{address}", response_model=HasVotedResponse, responses=ERROR_RESPONSES)
def get_has_voted(address: str, contract: VotingContract = Depends(get_contract)):
    return HasVotedResponse(hasVoted=contract.has_voted(address))


@router.post("/vote", response_model=PreparedTransactionResponse, responses=ERROR_RESPONSES)
def prepare_vote(vote: VoteRequest, contract: VotingContract = Depends(get_contract)):
    prepared = contract.prepare_vote(vote.proposalId, vote.fromAddress)
    logger.info(
        "Prepared vote tx proposal=%s from=%s gas=%d",
        vote.proposalId,
        vote.fromAddress,
        prepared.gas,
    )
    return PreparedTransactionResponse(to=prepared.to, data=prepared.data, gas=str(prepared.gas))


@router.get("/votingStats", response_model=VotingStatsResponse, responses=ERROR_RESPONSES)
def get_voting_stats(contract: VotingContract = Depends(get_contract)):
    stats = contract.voting_stats()
    return VotingStatsResponse(
        totalVotes=stats.total_votes,
        highestVote=stats.highest_vote,
        leadingProposal=stats.leading_proposal,
    )


def _error_response(message: str, request_id: Optional[str] = None) -> JSONResponse:
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=500, content={"error": message}, headers=headers)


def _format_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(
    config: Optional[RelayConfig] = None,
    contract: Optional[VotingContract] = None,
) -> FastAPI:
    """Build the relay app; ``uvicorn relay.main:create_app --factory`` reads the env."""
    if contract is None:
        config = config or RelayConfig.from_env()
        contract = VotingContract(config)
    config = config or contract.config

    app = FastAPI(
        title="Voting Relay",
        description="Reads voting contract state and prepares unsigned vote transactions",
        version="1.0.0",
    )
    app.state.config = config
    app.state.contract = contract

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled exception method=%s path=%s request_id=%s",
                request.method,
                str(request.url),
                request_id,
            )
            response = _error_response(str(e) or "Internal Server Error")
        duration_ms = (time.perf_counter() - start) * 1000.0

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "HTTP %s %s status=%s ms=%.1f request_id=%s",
            request.method,
            str(request.url),
            response.status_code,
            duration_ms,
            request_id,
        )
        return response

    @app.exception_handler(UpstreamUnavailable)
    async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailable):
        return _error_response(str(exc) or "Upstream unavailable")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Malformed input is not classified; it surfaces as a generic failure.
        logger.warning("Rejected request %s %s: %s", request.method, request.url.path, exc.errors())
        return _error_response(_format_validation_error(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(getattr(request, "state", None), "request_id", None)
        logger.exception(
            "Unhandled exception (handler) method=%s path=%s request_id=%s",
            request.method,
            str(request.url),
            request_id,
        )
        return _error_response(str(exc) or "Internal Server Error", request_id)

    app.include_router(router)

    logger.info(
        "Voting relay ready contract=%s rpc=%s",
        contract.contract_address,
        config.rpc_url,
    )
    return app
