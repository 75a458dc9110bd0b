"""Fee configuration for the launchpad."""

from dataclasses import dataclass

from launchpad.constants import BPS_DENOMINATOR, MAX_FEE_BPS


@dataclass(frozen=True)
class FeeConfig:
    """Bounds and units for fee calculation.

    Attributes:
        bps_denominator: Basis points in 100% (default: 10,000)
        max_fee_bps: Governance ceiling on the fee rate (default: 1,000 = 10%)
    """

    bps_denominator: int = BPS_DENOMINATOR
    max_fee_bps: int = MAX_FEE_BPS


# Default configuration instance
DEFAULT_FEE_CONFIG = FeeConfig()
