"""Bonding curve entity and its lifecycle types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction

from launchpad.errors import Underflow


class LifecycleState(str, Enum):
    """Lifecycle of a curve. Only ever moves forward."""

    TRADING = "trading"
    COMPLETE = "complete"
    MIGRATED = "migrated"


class BuyMode(str, Enum):
    """Which amount the buyer fixes."""

    EXACT_OUT = "exact_out"  # buyer fixes tokens out, bounds max sol cost
    EXACT_IN = "exact_in"  # buyer fixes sol in, bounds min tokens out


@dataclass(frozen=True)
class CompletionSnapshot:
    """Reserves frozen at the instant a curve completed.

    Migration hands exactly these amounts to the venue.
    """

    real_sol_reserves: int
    real_token_reserves: int
    virtual_sol_reserves: int
    virtual_token_reserves: int
    completed_at: int

    @property
    def final_price(self) -> Fraction:
        """Last Vs / Vt ratio (lamports per token base unit)."""
        return Fraction(self.virtual_sol_reserves, self.virtual_token_reserves)


@dataclass(frozen=True)
class TokenMetadata:
    """Display metadata stored alongside a curve."""

    name: str
    symbol: str
    uri: str


@dataclass(frozen=True)
class BondingCurve:
    """Persisted reserve state of one listed asset.

    Instances are immutable; trades produce a new value via with_reserves()
    that the store commits atomically.
    """

    address: str
    asset_id: str
    creator: str
    virtual_token_reserves: int
    virtual_sol_reserves: int
    real_token_reserves: int
    real_sol_reserves: int
    token_total_supply: int
    state: LifecycleState
    created_at: int
    seed: bytes
    buy_mode: BuyMode = BuyMode.EXACT_OUT
    creator_allocation: int = 0
    migration_token_reserve: int = 0
    completion: CompletionSnapshot | None = None
    migrated_at: int | None = None

    @property
    def invariant(self) -> int:
        """Constant product k = Vs * Vt."""
        return self.virtual_sol_reserves * self.virtual_token_reserves

    @property
    def is_trading(self) -> bool:
        return self.state == LifecycleState.TRADING

    @property
    def is_complete(self) -> bool:
        return self.state == LifecycleState.COMPLETE

    @property
    def is_migrated(self) -> bool:
        return self.state == LifecycleState.MIGRATED

    def with_reserves(
        self,
        *,
        virtual_sol_reserves: int,
        virtual_token_reserves: int,
        real_sol_reserves: int,
        real_token_reserves: int,
    ) -> BondingCurve:
        """Return a copy with updated reserves.

        Raises:
            Underflow: If a real reserve would be negative
        """
        if real_sol_reserves < 0 or real_token_reserves < 0:
            raise Underflow(
                f"Real reserves cannot be negative: sol={real_sol_reserves}, "
                f"tokens={real_token_reserves}"
            )
        return replace(
            self,
            virtual_sol_reserves=virtual_sol_reserves,
            virtual_token_reserves=virtual_token_reserves,
            real_sol_reserves=real_sol_reserves,
            real_token_reserves=real_token_reserves,
        )
