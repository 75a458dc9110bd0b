"""Migration handoff to an external liquidity venue.

This module is a boundary contract, not a venue integration. When a
completed curve is migrated, the program builds a MigrationRecord from the
reserves frozen at completion and hands it to a LiquidityVenue, which
returns the identity of the pool that will receive the liquidity.

Guarantees upheld by the program regardless of the venue:
- a record is never built before the curve is COMPLETE
- seed() is never called twice for the same curve
- record amounts come from the CompletionSnapshot, never re-derived
- the opening price equals the curve's last Vs / Vt ratio
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from fractions import Fraction
from typing import Protocol

import structlog

from launchpad.constants import MIGRATION_PRICE_SCALE
from launchpad.errors import AlreadyMigrated
from launchpad.models.curve import BondingCurve, CompletionSnapshot
from launchpad.models.types import derive_address
from launchpad.safe_int import S, checked_mul_u128

logger = structlog.get_logger()


@dataclass(frozen=True)
class MigrationRecord:
    """Liquidity-seeding record handed to the venue.

    Attributes:
        curve_address: Curve being migrated
        asset_id: Token being listed
        creator: Curve creator (LP beneficiary)
        sol_amount: Frozen real sol reserves
        token_amount: Frozen real token reserves plus the migration reserve
        final_price: Last Vs / Vt, exact
        price_scaled: floor(Vs * 10^6 / Vt), the integer form venues take
        completed_at: When the curve completed
    """

    curve_address: str
    asset_id: str
    creator: str
    sol_amount: int
    token_amount: int
    final_price: Fraction
    price_scaled: int
    completed_at: int


def build_migration_record(curve: BondingCurve, snapshot: CompletionSnapshot) -> MigrationRecord:
    """Build the handoff record from a completion snapshot.

    Raises:
        Overflow: If the token amount does not fit u64
    """
    token_amount = (S(snapshot.real_token_reserves) + curve.migration_token_reserve).to_u64()
    price_scaled = (
        checked_mul_u128(snapshot.virtual_sol_reserves, MIGRATION_PRICE_SCALE)
        // snapshot.virtual_token_reserves
    ).to_u64()
    return MigrationRecord(
        curve_address=curve.address,
        asset_id=curve.asset_id,
        creator=curve.creator,
        sol_amount=snapshot.real_sol_reserves,
        token_amount=token_amount,
        final_price=snapshot.final_price,
        price_scaled=price_scaled,
        completed_at=snapshot.completed_at,
    )


class LiquidityVenue(Protocol):
    """Downstream venue that opens a pool from a migration record."""

    def seed(self, record: MigrationRecord) -> str:
        """Create or reserve a pool for the record.

        Returns:
            Identity of the pool account that receives the liquidity
        """
        ...

    def cancel(self, pool: str) -> None:
        """Release a pool whose funding failed after seed() returned."""
        ...


class InMemoryVenue:
    """Venue double that opens one pool per curve and remembers records."""

    def __init__(self) -> None:
        self._pools: dict[str, MigrationRecord] = {}
        self._lock = threading.Lock()

    def seed(self, record: MigrationRecord) -> str:
        with self._lock:
            pool = derive_address(b"pool", record.curve_address)
            if pool in self._pools:
                raise AlreadyMigrated(f"Pool already seeded for {record.curve_address[:12]}")
            self._pools[pool] = record
        logger.info(
            "venue_pool_seeded",
            pool=pool[:12],
            sol_amount=record.sol_amount,
            token_amount=record.token_amount,
            price_scaled=record.price_scaled,
        )
        return pool

    def cancel(self, pool: str) -> None:
        with self._lock:
            self._pools.pop(pool, None)

    @property
    def pools(self) -> dict[str, MigrationRecord]:
        return dict(self._pools)
