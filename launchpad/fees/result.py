"""Fee calculation result types."""

from dataclasses import dataclass
from enum import Enum


class TradeSide(str, Enum):
    """Direction of a trade against the curve."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class FeeBreakdown:
    """Fee charged on a single trade.

    The fee is computed once from the pre-fee quoted amount. For buys it is
    added on top of the cost; for sells it is taken out of the proceeds.

    Attributes:
        side: Trade direction
        quoted: Pre-fee amount in lamports (cost for buys, proceeds for sells)
        fee: Fee in lamports, paid to the fee recipient
        fee_bps: Rate the fee was computed at

    Examples:
        # Buy: 1,000,000 lamports cost at 100 bps
        fees = FeeBreakdown(side=TradeSide.BUY, quoted=1_000_000, fee=10_000, fee_bps=100)
        assert fees.trader_amount == 1_010_000  # buyer pays

        # Sell: 1,000,000 lamports proceeds at 100 bps
        fees = FeeBreakdown(side=TradeSide.SELL, quoted=1_000_000, fee=10_000, fee_bps=100)
        assert fees.trader_amount == 990_000  # seller receives
    """

    side: TradeSide
    quoted: int
    fee: int
    fee_bps: int

    @property
    def trader_amount(self) -> int:
        """Lamports the buyer pays, or the seller receives."""
        if self.side == TradeSide.BUY:
            return self.quoted + self.fee
        return self.quoted - self.fee

    @property
    def has_fee(self) -> bool:
        return self.fee > 0
