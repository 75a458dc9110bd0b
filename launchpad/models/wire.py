"""Pydantic request / response models for the HTTP API.

Amounts travel as decimal strings (U64) so that clients in languages
without 64-bit integers do not lose precision. Field names are camelCase
on the wire and snake_case in Python.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from launchpad.models.config import GlobalConfig
from launchpad.models.curve import BondingCurve, TokenMetadata
from launchpad.models.types import U64, Address, Identity


class WireModel(BaseModel):
    model_config = {"populate_by_name": True}


# --- Requests ---


class CreateCurveRequest(WireModel):
    """List a new asset. Length limits are enforced by the program."""

    asset_id: Identity = Field(alias="assetId", description="Asset to list")
    name: str
    symbol: str
    uri: str


class BuyRequest(WireModel):
    amount: U64 = Field(description="Tokens out (exact_out) or pre-fee lamports in (exact_in)")
    limit: U64 = Field(description="Max total lamports (exact_out) or min tokens (exact_in)")


class SellRequest(WireModel):
    token_amount: U64 = Field(alias="tokenAmount")
    min_sol_out: U64 = Field(alias="minSolOut", description="Min net lamports after fee")


class QuoteRequest(WireModel):
    amount: U64 = Field(description="Buy amount per curve mode, or tokens to sell")


class ConfigUpdateRequest(WireModel):
    fee_bps: int | None = Field(default=None, alias="feeBps")
    fee_recipient: Identity | None = Field(default=None, alias="feeRecipient")
    new_authority: Identity | None = Field(default=None, alias="newAuthority")


class PauseRequest(WireModel):
    paused: bool


# --- Responses ---


class CurveResponse(WireModel):
    """Public view of a curve."""

    address: Address
    asset_id: str = Field(alias="assetId")
    creator: str
    state: str
    buy_mode: str = Field(alias="buyMode")
    virtual_token_reserves: U64 = Field(alias="virtualTokenReserves")
    virtual_sol_reserves: U64 = Field(alias="virtualSolReserves")
    real_token_reserves: U64 = Field(alias="realTokenReserves")
    real_sol_reserves: U64 = Field(alias="realSolReserves")
    token_total_supply: U64 = Field(alias="tokenTotalSupply")
    created_at: int = Field(alias="createdAt")
    completed_at: int | None = Field(default=None, alias="completedAt")
    migrated_at: int | None = Field(default=None, alias="migratedAt")
    name: str | None = None
    symbol: str | None = None
    uri: str | None = None
    price_sol: Decimal = Field(alias="priceSol", description="Spot price in SOL per token")
    market_cap: U64 = Field(alias="marketCap", description="Lamports at spot price, full supply")
    progress: Decimal = Field(description="Percent of curve tokens sold")

    @classmethod
    def from_curve(
        cls,
        curve: BondingCurve,
        metadata: TokenMetadata | None,
        price_sol: Decimal,
        progress: Decimal,
        market_cap: int,
    ) -> CurveResponse:
        return cls(
            address=curve.address,
            asset_id=curve.asset_id,
            creator=curve.creator,
            state=curve.state.value,
            buy_mode=curve.buy_mode.value,
            virtual_token_reserves=curve.virtual_token_reserves,
            virtual_sol_reserves=curve.virtual_sol_reserves,
            real_token_reserves=curve.real_token_reserves,
            real_sol_reserves=curve.real_sol_reserves,
            token_total_supply=curve.token_total_supply,
            created_at=curve.created_at,
            completed_at=curve.completion.completed_at if curve.completion else None,
            migrated_at=curve.migrated_at,
            name=metadata.name if metadata else None,
            symbol=metadata.symbol if metadata else None,
            uri=metadata.uri if metadata else None,
            price_sol=price_sol,
            market_cap=market_cap,
            progress=progress,
        )


class QuoteResponse(WireModel):
    side: str
    token_amount: U64 = Field(alias="tokenAmount")
    sol_amount: U64 = Field(alias="solAmount", description="Pre-fee lamports")
    fee: U64
    trader_sol: U64 = Field(alias="traderSol", description="Buyer total or seller net")
    clamped: bool = False
    price_impact: Decimal = Field(alias="priceImpact", description="Spot price change, percent")


class TradeResponse(WireModel):
    quote: QuoteResponse
    curve: CurveResponse
    completed: bool


class MigrationResponse(WireModel):
    pool: str
    sol_amount: U64 = Field(alias="solAmount")
    token_amount: U64 = Field(alias="tokenAmount")
    price_scaled: U64 = Field(alias="priceScaled")
    curve: CurveResponse


class ConfigResponse(WireModel):
    address: Address
    authority: str
    fee_recipient: str = Field(alias="feeRecipient")
    fee_bps: int = Field(alias="feeBps")
    paused: bool
    buy_mode: str = Field(alias="buyMode")
    graduation: str
    sell_enabled: bool = Field(alias="sellEnabled")

    @classmethod
    def from_config(cls, address: str, config: GlobalConfig) -> ConfigResponse:
        params = config.curve_params
        return cls(
            address=address,
            authority=config.authority,
            fee_recipient=config.fee_recipient,
            fee_bps=config.fee_bps,
            paused=config.paused,
            buy_mode=params.buy_mode.value,
            graduation=params.graduation.value,
            sell_enabled=params.sell_enabled,
        )


class ErrorResponse(WireModel):
    error: str = Field(description="Exception class name")
    category: str
    detail: str
