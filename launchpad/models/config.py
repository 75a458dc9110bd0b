"""Deployment policy and the global config singleton."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from launchpad.constants import (
    BPS_DENOMINATOR,
    DEFAULT_FEE_BPS,
    GRADUATION_THRESHOLD,
    INITIAL_REAL_TOKEN_RESERVES,
    INITIAL_VIRTUAL_SOL_RESERVES,
    INITIAL_VIRTUAL_TOKEN_RESERVES,
    TOKEN_TOTAL_SUPPLY,
)
from launchpad.errors import InvalidParameters
from launchpad.models.curve import BuyMode
from launchpad.safe_int import U64_MAX, S


class GraduationPolicy(str, Enum):
    """When a curve stops trading and becomes eligible for migration."""

    SOLD_OUT = "sold_out"  # real token reserves reach zero
    THRESHOLD = "threshold"  # real sol reserves reach a fixed amount


@dataclass(frozen=True)
class CurveParams:
    """Parameters applied to every curve created under a deployment.

    The defaults follow the pump.fun reserve layout: a 1B token supply at
    6 decimals, 793.1M tokens sold through the curve, and 30 SOL of
    virtual liquidity seeding the opening price.

    Attributes:
        initial_virtual_token_reserves: Vt at creation
        initial_virtual_sol_reserves: Vs at creation
        initial_real_token_reserves: Tokens sold through the curve
        token_total_supply: Fixed supply minted at creation
        creator_allocation_bps: Share of supply minted to the creator (0-10000)
        buy_mode: Buy calling contract bound to each new curve
        graduation: Completion trigger
        graduation_threshold: Real sol amount for THRESHOLD graduation
        sell_enabled: False for buy-only deployments
    """

    initial_virtual_token_reserves: int = INITIAL_VIRTUAL_TOKEN_RESERVES
    initial_virtual_sol_reserves: int = INITIAL_VIRTUAL_SOL_RESERVES
    initial_real_token_reserves: int = INITIAL_REAL_TOKEN_RESERVES
    token_total_supply: int = TOKEN_TOTAL_SUPPLY
    creator_allocation_bps: int = 0
    buy_mode: BuyMode = BuyMode.EXACT_OUT
    graduation: GraduationPolicy = GraduationPolicy.SOLD_OUT
    graduation_threshold: int = GRADUATION_THRESHOLD
    sell_enabled: bool = True

    @property
    def creator_allocation(self) -> int:
        """Tokens minted to the creator at creation."""
        return self.token_total_supply * self.creator_allocation_bps // BPS_DENOMINATOR

    @property
    def migration_token_reserve(self) -> int:
        """Tokens held back in the vault for venue seeding."""
        return (
            self.token_total_supply
            - self.creator_allocation
            - self.initial_real_token_reserves
        )

    @property
    def sell_out_proceeds(self) -> int:
        """Real sol a curve holds once all its tokens are bought at the opening invariant.

        Rounding and sells only grow the invariant, so a curve that sells out
        has raised at least this much.
        """
        k = S(self.initial_virtual_sol_reserves) * self.initial_virtual_token_reserves
        remaining = self.initial_virtual_token_reserves - self.initial_real_token_reserves
        return (k.ceiling_div(remaining) - self.initial_virtual_sol_reserves).value

    def validate(self) -> CurveParams:
        """Check the parameters are internally consistent.

        Returns:
            self, for chaining

        Raises:
            InvalidParameters: On any out-of-range or inconsistent value
        """
        reserves = {
            "initial_virtual_token_reserves": self.initial_virtual_token_reserves,
            "initial_virtual_sol_reserves": self.initial_virtual_sol_reserves,
            "initial_real_token_reserves": self.initial_real_token_reserves,
            "token_total_supply": self.token_total_supply,
        }
        for name, value in reserves.items():
            if not 0 < value <= U64_MAX:
                raise InvalidParameters(f"{name} must be in (0, 2^64-1], got {value}")

        if not 0 <= self.creator_allocation_bps <= BPS_DENOMINATOR:
            raise InvalidParameters(
                f"creator_allocation_bps must be in [0, {BPS_DENOMINATOR}], "
                f"got {self.creator_allocation_bps}"
            )
        if self.initial_real_token_reserves >= self.initial_virtual_token_reserves:
            raise InvalidParameters("Real token reserves must be below virtual token reserves")
        if self.migration_token_reserve < 0:
            raise InvalidParameters(
                "Creator allocation plus curve tokens exceeds total supply: "
                f"{self.creator_allocation} + {self.initial_real_token_reserves} "
                f"> {self.token_total_supply}"
            )
        if self.graduation == GraduationPolicy.THRESHOLD and self.graduation_threshold <= 0:
            raise InvalidParameters("graduation_threshold must be positive")
        if (
            self.graduation == GraduationPolicy.THRESHOLD
            and self.graduation_threshold > self.sell_out_proceeds
        ):
            raise InvalidParameters(
                f"graduation_threshold {self.graduation_threshold} is above the "
                f"{self.sell_out_proceeds} lamports a sold-out curve raises"
            )
        return self


DEFAULT_CURVE_PARAMS = CurveParams()


@dataclass(frozen=True)
class GlobalConfig:
    """Singleton governance state.

    Trading operations receive this as a point-in-time snapshot; it is
    replaced wholesale by update_config / set_pause.
    """

    authority: str
    fee_recipient: str
    fee_bps: int = DEFAULT_FEE_BPS
    paused: bool = False
    curve_params: CurveParams = DEFAULT_CURVE_PARAMS

    def updated(self, **changes: object) -> GlobalConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]
