"""API endpoints for the launchpad.

Handlers are plain (sync) functions so FastAPI runs them in its threadpool;
the program serializes work per curve with its own locks.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header

from launchpad import analytics
from launchpad.fees import TradeSide
from launchpad.models.curve import BondingCurve
from launchpad.models.wire import (
    BuyRequest,
    ConfigResponse,
    ConfigUpdateRequest,
    CreateCurveRequest,
    CurveResponse,
    MigrationResponse,
    PauseRequest,
    QuoteRequest,
    QuoteResponse,
    SellRequest,
    TradeResponse,
)
from launchpad.program import LaunchpadProgram, get_default_program
from launchpad.trading import TradeQuote

logger = structlog.get_logger()

router = APIRouter()

# Identity of the caller, authenticated by the host in front of this service
Caller = Annotated[str, Header(alias="X-Caller", min_length=1, max_length=64)]


def get_program() -> LaunchpadProgram:
    """Dependency provider for the program instance.

    Override this in tests to inject a program with its own ledger:
        app.dependency_overrides[get_program] = lambda: program
    """
    return get_default_program()


Program = Annotated[LaunchpadProgram, Depends(get_program)]


def _curve_view(program: LaunchpadProgram, curve: BondingCurve) -> CurveResponse:
    return CurveResponse.from_curve(
        curve,
        program.get_metadata(curve.address),
        price_sol=analytics.price_in_sol(curve),
        market_cap=analytics.market_cap(curve),
        progress=analytics.progress(curve).percent,
    )


def _quote_view(curve: BondingCurve, quote: TradeQuote) -> QuoteResponse:
    return QuoteResponse(
        side=quote.side.value,
        token_amount=quote.token_amount,
        sol_amount=quote.sol_amount,
        fee=quote.fees.fee,
        trader_sol=quote.trader_sol,
        clamped=quote.clamped,
        price_impact=analytics.price_impact(curve, quote),
    )


@router.post("/curves", status_code=201)
def create_curve(request: CreateCurveRequest, caller: Caller, program: Program) -> CurveResponse:
    """List a new asset on a fresh curve. The caller becomes its creator."""
    curve = program.create(caller, request.asset_id, request.name, request.symbol, request.uri)
    return _curve_view(program, curve)


@router.get("/curves/{address}")
def get_curve(address: str, program: Program) -> CurveResponse:
    return _curve_view(program, program.get_curve(address))


@router.post("/curves/{address}/quote/{side}")
def quote(address: str, side: TradeSide, request: QuoteRequest, program: Program) -> QuoteResponse:
    """Preview a buy or sell without changing any state."""
    curve = program.get_curve(address)
    amount = int(request.amount)
    if side == TradeSide.BUY:
        trade_quote = program.quote_buy(address, amount)
    else:
        trade_quote = program.quote_sell(address, amount)
    return _quote_view(curve, trade_quote)


@router.post("/curves/{address}/buy")
def buy(address: str, request: BuyRequest, caller: Caller, program: Program) -> TradeResponse:
    receipt = program.buy(caller, address, int(request.amount), int(request.limit))
    return TradeResponse(
        quote=_quote_view(receipt.curve_before, receipt.quote),
        curve=_curve_view(program, receipt.curve),
        completed=receipt.completed,
    )


@router.post("/curves/{address}/sell")
def sell(address: str, request: SellRequest, caller: Caller, program: Program) -> TradeResponse:
    receipt = program.sell(caller, address, int(request.token_amount), int(request.min_sol_out))
    return TradeResponse(
        quote=_quote_view(receipt.curve_before, receipt.quote),
        curve=_curve_view(program, receipt.curve),
        completed=receipt.completed,
    )


@router.post("/curves/{address}/migrate")
def migrate(address: str, caller: Caller, program: Program) -> MigrationResponse:
    """Hand a completed curve to the liquidity venue. Any caller may trigger it."""
    receipt = program.migrate(caller, address)
    return MigrationResponse(
        pool=receipt.pool,
        sol_amount=receipt.record.sol_amount,
        token_amount=receipt.record.token_amount,
        price_scaled=receipt.record.price_scaled,
        curve=_curve_view(program, receipt.curve),
    )


@router.get("/config")
def get_config(program: Program) -> ConfigResponse:
    return ConfigResponse.from_config(program.config_address, program.get_config())


@router.patch("/config")
def update_config(request: ConfigUpdateRequest, caller: Caller, program: Program) -> ConfigResponse:
    config = program.update_config(
        caller,
        fee_bps=request.fee_bps,
        fee_recipient=request.fee_recipient,
        new_authority=request.new_authority,
    )
    return ConfigResponse.from_config(program.config_address, config)


@router.post("/config/pause")
def set_pause(request: PauseRequest, caller: Caller, program: Program) -> ConfigResponse:
    config = program.set_pause(caller, request.paused)
    logger.info("pause_changed", paused=config.paused)
    return ConfigResponse.from_config(program.config_address, config)
