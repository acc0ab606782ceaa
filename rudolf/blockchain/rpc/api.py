from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel
from typing import Any, Optional
from ...protocol.types.call import SignedCall
from ...protocol.types.common import TokenError, Unauthorized, UnknownSnapshot
from ..core.token import RudolfToken
from ..observability.metrics import metrics_registry, update_metrics
import logging

logger = logging.getLogger(__name__)

app = FastAPI(title="Rudolf Token RPC")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
token: Optional[RudolfToken] = None


class CallResponse(BaseModel):
    call_hash: str
    status: str
    result: Any = None


_STATUS_BY_ERROR = {
    Unauthorized: 403,
    UnknownSnapshot: 404,
}


@app.exception_handler(TokenError)
async def token_error_handler(request: Request, exc: TokenError):
    status_code = _STATUS_BY_ERROR.get(type(exc), 400)
    return JSONResponse(status_code=status_code, content={"error": exc.kind, "detail": exc.reason})


def _require_token() -> RudolfToken:
    if not token:
        raise HTTPException(status_code=503, detail="Node not initialized")
    return token


@app.get("/status")
async def get_status():
    t = _require_token()
    return {
        "network": t.config.network_id,
        "name": t.name(),
        "symbol": t.symbol(),
        "decimals": t.decimals(),
        "total_supply": str(t.total_supply()),
        "owner": t.owner(),
        "paused": t.paused(),
        "last_block_time": t.state.last_block_time,
    }


@app.get("/balance/{address}")
async def get_balance(address: str):
    t = _require_token()
    return {
        "address": address,
        "balance": str(t.balance_of(address)),
        "nonce": t.nonce_of(address)
    }


@app.get("/supply")
async def get_supply():
    t = _require_token()
    return {"total_supply": str(t.total_supply()), "decimals": t.decimals()}


@app.get("/allowance/{owner}/{spender}")
async def get_allowance(owner: str, spender: str):
    t = _require_token()
    return {"owner": owner, "spender": spender, "allowance": str(t.allowance(owner, spender))}


@app.get("/airdrop/schedule")
async def get_airdrop_schedule():
    t = _require_token()
    return {
        "next_year": t.get_next_distribution_year(),
        "next_time": t.get_next_distribution_time(),
        "last_snapshot_id": t.get_last_airdrop_snapshot_id(),
        "distribution_count": t.get_distribution_count(),
    }


@app.get("/airdrop/records")
async def get_airdrop_records():
    t = _require_token()
    return {
        "records": [
            {
                "snapshot_id": r.snapshot_id,
                "year": r.year,
                "timestamp": r.timestamp,
                "total_supply": str(r.total_supply),
                "amount": str(r.amount),
            }
            for r in t.get_airdrops()
        ]
    }


@app.get("/airdrop/claimable/{address}")
async def get_claimable(address: str):
    t = _require_token()
    return {"address": address, "claimable": str(t.get_claimable_airdrop_amount_for_account(address))}


@app.get("/airdrop/vested/{address}")
async def get_vested(address: str):
    t = _require_token()
    vested = t.get_vested_airdrop_amount_for_account(address)
    return {
        "address": address,
        "vested": [{"release_time": v.release_time, "amount": str(v.amount)} for v in vested],
        "total_vested": str(sum(v.amount for v in vested)),
    }


@app.get("/snapshot/{snapshot_id}/balance/{address}")
async def get_snapshot_balance(snapshot_id: int, address: str):
    t = _require_token()
    return {
        "snapshot_id": snapshot_id,
        "address": address,
        "balance": str(t.balance_of_at(address, snapshot_id)),
    }


@app.get("/snapshot/{snapshot_id}/supply")
async def get_snapshot_supply(snapshot_id: int):
    t = _require_token()
    return {"snapshot_id": snapshot_id, "total_supply": str(t.total_supply_at(snapshot_id))}


@app.post("/call", response_model=CallResponse)
async def send_call(call: SignedCall):
    t = _require_token()
    result = t.execute(call)
    logger.info(f"Call {call.call_type.value} from {call.from_address} committed")
    if isinstance(result, int) and not isinstance(result, bool):
        result = str(result)
    return CallResponse(call_hash=call.hash(), status="committed", result=result)


@app.get("/metrics")
async def get_metrics():
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    t = _require_token()
    update_metrics(t)
    return Response(
        content=generate_latest(metrics_registry),
        media_type=CONTENT_TYPE_LATEST
    )
