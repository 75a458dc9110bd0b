"""Constant product bonding curve.

Pricing follows x * y = k over the virtual reserves:

    buy exact out:  cost       = ceil(k / (Vt - tokens_out)) - Vs
    buy exact in:   tokens_out = Vt - ceil(k / (Vs + sol_in))
    sell exact in:  sol_out    = floor(Vs * tokens_in / (Vt + tokens_in))

Each formula leaves the post-trade product >= k. Products of two reserves
are formed at u128 width and every reserve written back is narrowed to u64.
"""

from __future__ import annotations

from fractions import Fraction

import structlog

from launchpad.amm.base import CurveSwap, PricingCurve
from launchpad.errors import InsufficientLiquidity, InvalidReserves, ZeroAmount
from launchpad.safe_int import S, checked_mul_u128

logger = structlog.get_logger()


class ConstantProductCurve(PricingCurve):
    """Constant product pricing with pool-favoring rounding."""

    def buy_exact_out(self, tokens_out: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Calculate the sol cost of buying exactly tokens_out.

        Args:
            tokens_out: Tokens the buyer receives
            sol_reserves: Virtual sol reserves (Vs)
            token_reserves: Virtual token reserves (Vt)

        Returns:
            CurveSwap with amount_in = pre-fee sol cost

        Raises:
            ZeroAmount: If tokens_out is zero
            InvalidReserves: If either reserve is zero
            InsufficientLiquidity: If tokens_out >= token_reserves
            Overflow: If the new sol reserve does not fit u64
        """
        _require_amount(tokens_out)
        k = _invariant(sol_reserves, token_reserves)
        if tokens_out >= token_reserves:
            raise InsufficientLiquidity(
                f"Cannot buy {tokens_out} tokens from virtual reserve of {token_reserves}"
            )

        new_token_reserves = S(token_reserves) - tokens_out
        new_sol_reserves = k.ceiling_div(new_token_reserves).to_u64()
        cost = (S(new_sol_reserves) - sol_reserves).value

        return CurveSwap(
            amount_in=cost,
            amount_out=tokens_out,
            new_virtual_sol_reserves=new_sol_reserves,
            new_virtual_token_reserves=new_token_reserves.value,
        )

    def buy_exact_in(self, sol_in: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Calculate the tokens received for spending exactly sol_in.

        Args:
            sol_in: Pre-fee sol entering the reserves
            sol_reserves: Virtual sol reserves (Vs)
            token_reserves: Virtual token reserves (Vt)

        Returns:
            CurveSwap with amount_out = tokens received (may be zero for dust)

        Raises:
            ZeroAmount: If sol_in is zero
            InvalidReserves: If either reserve is zero
            Overflow: If Vs + sol_in does not fit u64
        """
        _require_amount(sol_in)
        k = _invariant(sol_reserves, token_reserves)

        new_sol_reserves = (S(sol_reserves) + sol_in).to_u64()
        new_token_reserves = k.ceiling_div(new_sol_reserves).to_u64()
        tokens_out = (S(token_reserves) - new_token_reserves).value

        return CurveSwap(
            amount_in=sol_in,
            amount_out=tokens_out,
            new_virtual_sol_reserves=new_sol_reserves,
            new_virtual_token_reserves=new_token_reserves,
        )

    def sell_exact_in(self, tokens_in: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Calculate the sol received for selling exactly tokens_in.

        Args:
            tokens_in: Tokens returned to the curve
            sol_reserves: Virtual sol reserves (Vs)
            token_reserves: Virtual token reserves (Vt)

        Returns:
            CurveSwap with amount_out = pre-fee sol proceeds

        Raises:
            ZeroAmount: If tokens_in is zero
            InvalidReserves: If either reserve is zero
            Overflow: If Vt + tokens_in does not fit u64
        """
        _require_amount(tokens_in)
        _invariant(sol_reserves, token_reserves)

        new_token_reserves = (S(token_reserves) + tokens_in).to_u64()
        numerator = checked_mul_u128(sol_reserves, tokens_in)
        sol_out = (numerator // new_token_reserves).to_u64()
        new_sol_reserves = (S(sol_reserves) - sol_out).value

        return CurveSwap(
            amount_in=tokens_in,
            amount_out=sol_out,
            new_virtual_sol_reserves=new_sol_reserves,
            new_virtual_token_reserves=new_token_reserves,
        )

    def spot_price(self, sol_reserves: int, token_reserves: int) -> Fraction:
        """Marginal price Vs / Vt in lamports per token base unit.

        Raises:
            InvalidReserves: If either reserve is zero
        """
        if sol_reserves <= 0 or token_reserves <= 0:
            raise InvalidReserves(
                f"Reserves must be positive: sol={sol_reserves}, tokens={token_reserves}"
            )
        return Fraction(sol_reserves, token_reserves)


def _require_amount(amount: int) -> None:
    if amount <= 0:
        raise ZeroAmount(f"Trade amount must be positive, got {amount}")


def _invariant(sol_reserves: int, token_reserves: int) -> S:
    if sol_reserves <= 0 or token_reserves <= 0:
        logger.warning(
            "pricing_invalid_reserves",
            sol_reserves=sol_reserves,
            token_reserves=token_reserves,
        )
        raise InvalidReserves(
            f"Reserves must be positive: sol={sol_reserves}, tokens={token_reserves}"
        )
    return checked_mul_u128(sol_reserves, token_reserves)


# Singleton instance
constant_product = ConstantProductCurve()
