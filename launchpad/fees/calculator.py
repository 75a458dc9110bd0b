"""Basis-point fee policy.

Uses SafeInt so that the fee computation surfaces overflow explicitly:
- amount * fee_bps is formed at u128 width
- the resulting fee and trader amount are narrowed to u64
"""

from __future__ import annotations

from typing import Protocol

import structlog

from launchpad.errors import FeeTooHigh
from launchpad.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from launchpad.fees.result import FeeBreakdown, TradeSide
from launchpad.safe_int import S

logger = structlog.get_logger()


class FeePolicy(Protocol):
    """Protocol for trade fee calculation."""

    def validate_fee_bps(self, fee_bps: int) -> int:
        """Check a fee rate against governance bounds.

        Raises:
            FeeTooHigh: If fee_bps is outside the allowed range
        """
        ...

    def compute(self, side: TradeSide, quoted: int, fee_bps: int) -> FeeBreakdown:
        """Compute the fee for a pre-fee quoted amount."""
        ...


class BasisPointFeePolicy:
    """fee = floor(amount * fee_bps / 10000), with fee_bps in [0, max_fee_bps].

    Attributes:
        config: Fee configuration settings
    """

    def __init__(self, config: FeeConfig | None = None):
        self.config = config or DEFAULT_FEE_CONFIG

    def validate_fee_bps(self, fee_bps: int) -> int:
        if not 0 <= fee_bps <= self.config.max_fee_bps:
            raise FeeTooHigh(
                f"Fee {fee_bps} bps outside allowed range [0, {self.config.max_fee_bps}]"
            )
        return fee_bps

    def fee_for(self, amount: int, fee_bps: int) -> int:
        """Floor fee on amount at fee_bps.

        Raises:
            FeeTooHigh: If fee_bps is out of bounds
            Overflow: If amount is not u64
        """
        self.validate_fee_bps(fee_bps)
        product = S(S(amount).to_u64()) * fee_bps
        product.to_u128()
        return (product // self.config.bps_denominator).to_u64()

    def compute(self, side: TradeSide, quoted: int, fee_bps: int) -> FeeBreakdown:
        """Compute the fee for a trade.

        Args:
            side: BUY adds the fee on top, SELL deducts it
            quoted: Pre-fee cost (buy) or proceeds (sell) in lamports
            fee_bps: Fee rate from the config snapshot

        Returns:
            FeeBreakdown whose trader_amount fits u64

        Raises:
            FeeTooHigh: If fee_bps is out of bounds
            Overflow: If cost + fee does not fit u64
        """
        fee = self.fee_for(quoted, fee_bps)
        breakdown = FeeBreakdown(side=side, quoted=quoted, fee=fee, fee_bps=fee_bps)
        # Buy totals can exceed u64 near the top of the range
        S(breakdown.trader_amount).to_u64()

        logger.debug(
            "fee_calculated",
            side=side.value,
            quoted=quoted,
            fee_bps=fee_bps,
            fee=fee,
        )
        return breakdown


# Default policy instance
DEFAULT_FEE_POLICY = BasisPointFeePolicy()
