"""Read-only market analytics over a curve's reserves.

Prices are exact Fractions of lamports per token base unit. Display
helpers convert to Decimal SOL per whole token using LAMPORTS_PER_SOL and
TOKEN_DECIMALS.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction

from launchpad.amm import PricingCurve, constant_product
from launchpad.constants import LAMPORTS_PER_SOL, TOKEN_DECIMALS
from launchpad.models.curve import BondingCurve, LifecycleState
from launchpad.trading import TradeQuote

_TOKEN_UNIT = 10**TOKEN_DECIMALS


def spot_price(curve: BondingCurve) -> Fraction:
    """Marginal price Vs / Vt in lamports per token base unit."""
    return constant_product.spot_price(curve.virtual_sol_reserves, curve.virtual_token_reserves)


def price_in_sol(curve: BondingCurve) -> Decimal:
    """Spot price in SOL per whole token."""
    price = spot_price(curve) * _TOKEN_UNIT / LAMPORTS_PER_SOL
    return Decimal(price.numerator) / Decimal(price.denominator)


def market_cap(curve: BondingCurve) -> int:
    """Fully diluted market cap in lamports at the spot price, floored."""
    return int(spot_price(curve) * curve.token_total_supply)


@dataclass(frozen=True)
class GraduationProgress:
    """How far a curve is through its sale.

    Attributes:
        tokens_sold: Curve tokens bought so far (net of sells)
        tokens_remaining: Real token reserves left
        percent: tokens_sold / curve allocation, 0-100
        sol_to_complete: Pre-fee lamports to buy every remaining token
        graduated: True once the curve has left TRADING
    """

    tokens_sold: int
    tokens_remaining: int
    percent: Decimal
    sol_to_complete: int
    graduated: bool


def curve_allocation(curve: BondingCurve) -> int:
    """Tokens the curve was created to sell."""
    return curve.token_total_supply - curve.creator_allocation - curve.migration_token_reserve


def progress(curve: BondingCurve, curve_math: PricingCurve | None = None) -> GraduationProgress:
    """Compute graduation progress for a curve."""
    curve_math = curve_math or constant_product
    allocation = curve_allocation(curve)
    remaining = curve.real_token_reserves
    sold = max(allocation - remaining, 0)

    percent = Decimal(0)
    if allocation > 0:
        percent = min(Decimal(100), Decimal(sold) * 100 / Decimal(allocation))

    sol_to_complete = 0
    if remaining > 0 and curve.state == LifecycleState.TRADING:
        sol_to_complete = curve_math.buy_exact_out(
            remaining, curve.virtual_sol_reserves, curve.virtual_token_reserves
        ).amount_in

    return GraduationProgress(
        tokens_sold=sold,
        tokens_remaining=remaining,
        percent=percent,
        sol_to_complete=sol_to_complete,
        graduated=curve.state != LifecycleState.TRADING,
    )


def price_impact(curve: BondingCurve, quote: TradeQuote) -> Decimal:
    """Percent change of the spot price if the quoted trade executed.

    Positive for buys, negative for sells.
    """
    before = spot_price(curve)
    after = constant_product.spot_price(
        quote.swap.new_virtual_sol_reserves, quote.swap.new_virtual_token_reserves
    )
    change = (after - before) * 100 / before
    return Decimal(change.numerator) / Decimal(change.denominator)
