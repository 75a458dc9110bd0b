"""Fee calculation module for the launchpad.

Usage:
    from launchpad.fees import DEFAULT_FEE_POLICY, TradeSide

    fees = DEFAULT_FEE_POLICY.compute(TradeSide.BUY, quoted=cost, fee_bps=config.fee_bps)
    total_cost = fees.trader_amount
"""

from launchpad.fees.calculator import DEFAULT_FEE_POLICY, BasisPointFeePolicy, FeePolicy
from launchpad.fees.config import DEFAULT_FEE_CONFIG, FeeConfig
from launchpad.fees.result import FeeBreakdown, TradeSide

__all__ = [
    # Policy
    "FeePolicy",
    "BasisPointFeePolicy",
    "DEFAULT_FEE_POLICY",
    # Config
    "FeeConfig",
    "DEFAULT_FEE_CONFIG",
    # Result
    "FeeBreakdown",
    "TradeSide",
]
