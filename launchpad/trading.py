"""Trade planning: quote, fee, slippage and the staged post-trade curve.

Planning is pure. A TradePlan holds the curve value to commit and the
transfers to execute; nothing is written until the program commits it.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from launchpad.amm import CurveSwap, PricingCurve, constant_product
from launchpad.errors import (
    InsufficientLiquidity,
    SellDisabled,
    SlippageExceeded,
    ZeroAmount,
)
from launchpad.fees import DEFAULT_FEE_POLICY, FeeBreakdown, FeePolicy, TradeSide
from launchpad.ledger import Transfer
from launchpad.models.config import GlobalConfig
from launchpad.models.curve import BondingCurve, BuyMode
from launchpad.safe_int import S

logger = structlog.get_logger()


@dataclass(frozen=True)
class TradeQuote:
    """Priced trade before slippage checks.

    Attributes:
        side: BUY or SELL
        token_amount: Tokens leaving (buy) or entering (sell) the curve
        swap: Pre-fee pricing result with post-trade virtual reserves
        fees: Fee breakdown on the pre-fee sol amount
        clamped: True if an exact-input buy was cut to the remaining real tokens
    """

    side: TradeSide
    token_amount: int
    swap: CurveSwap
    fees: FeeBreakdown
    clamped: bool = False

    @property
    def sol_amount(self) -> int:
        """Pre-fee sol moving into (buy) or out of (sell) the reserves."""
        return self.fees.quoted

    @property
    def trader_sol(self) -> int:
        """Total the buyer pays, or net the seller receives."""
        return self.fees.trader_amount


@dataclass(frozen=True)
class TradePlan:
    """A quote plus everything needed to commit it."""

    quote: TradeQuote
    curve_before: BondingCurve
    curve_after: BondingCurve
    transfers: tuple[Transfer, ...]


class TradePlanner:
    """Prices trades against a curve and stages the resulting state.

    Args:
        curve_math: Pricing function (default: constant product)
        fee_policy: Fee calculation (default: basis points)
    """

    def __init__(
        self,
        curve_math: PricingCurve | None = None,
        fee_policy: FeePolicy | None = None,
    ) -> None:
        self.curve_math = curve_math or constant_product
        self.fee_policy = fee_policy or DEFAULT_FEE_POLICY

    # --- Quotes ---

    def quote_buy(self, curve: BondingCurve, amount: int, fee_bps: int) -> TradeQuote:
        """Price a buy according to the curve's buy mode.

        Args:
            curve: Current curve state
            amount: Tokens out (EXACT_OUT) or pre-fee sol in (EXACT_IN)
            fee_bps: Fee rate from the config snapshot

        Raises:
            ZeroAmount: If amount is zero or buys no tokens
            InsufficientLiquidity: If the curve cannot supply the tokens
            InvalidReserves / CurveArithmeticError: From pricing
        """
        if amount <= 0:
            raise ZeroAmount(f"Buy amount must be positive, got {amount}")
        if curve.real_token_reserves == 0:
            raise InsufficientLiquidity(f"Curve {curve.address[:12]} has no tokens left")

        clamped = False
        if curve.buy_mode == BuyMode.EXACT_OUT:
            if amount > curve.real_token_reserves:
                raise InsufficientLiquidity(
                    f"Requested {amount} tokens, curve holds {curve.real_token_reserves}"
                )
            swap = self.curve_math.buy_exact_out(
                amount, curve.virtual_sol_reserves, curve.virtual_token_reserves
            )
        else:
            swap = self.curve_math.buy_exact_in(
                amount, curve.virtual_sol_reserves, curve.virtual_token_reserves
            )
            if swap.amount_out > curve.real_token_reserves:
                # Final buy: sell what is left and charge only for that
                swap = self.curve_math.buy_exact_out(
                    curve.real_token_reserves,
                    curve.virtual_sol_reserves,
                    curve.virtual_token_reserves,
                )
                clamped = True
            if swap.amount_out == 0:
                raise ZeroAmount(f"{amount} lamports is too small to buy any tokens")

        fees = self.fee_policy.compute(TradeSide.BUY, swap.amount_in, fee_bps)
        return TradeQuote(
            side=TradeSide.BUY,
            token_amount=swap.amount_out,
            swap=swap,
            fees=fees,
            clamped=clamped,
        )

    def quote_sell(self, curve: BondingCurve, token_amount: int, fee_bps: int) -> TradeQuote:
        """Price a sell of token_amount.

        Raises:
            ZeroAmount: If token_amount is zero or yields no sol
            InsufficientLiquidity: If proceeds exceed the curve's real sol
            InvalidReserves / CurveArithmeticError: From pricing
        """
        swap = self.curve_math.sell_exact_in(
            token_amount, curve.virtual_sol_reserves, curve.virtual_token_reserves
        )
        if swap.amount_out == 0:
            raise ZeroAmount(f"Selling {token_amount} tokens yields no sol")
        if swap.amount_out > curve.real_sol_reserves:
            raise InsufficientLiquidity(
                f"Curve underfunded: owes {swap.amount_out} lamports, "
                f"holds {curve.real_sol_reserves}"
            )

        fees = self.fee_policy.compute(TradeSide.SELL, swap.amount_out, fee_bps)
        return TradeQuote(side=TradeSide.SELL, token_amount=token_amount, swap=swap, fees=fees)

    # --- Plans ---

    def plan_buy(
        self,
        curve: BondingCurve,
        config: GlobalConfig,
        buyer: str,
        amount: int,
        limit: int,
    ) -> TradePlan:
        """Quote a buy, enforce the slippage bound and stage the new curve.

        Args:
            curve: Current curve state (must be TRADING)
            config: Config snapshot for this operation
            buyer: Buyer identity
            amount: Tokens out (EXACT_OUT) or pre-fee sol in (EXACT_IN)
            limit: Max total sol cost (EXACT_OUT) or min tokens out (EXACT_IN)

        Raises:
            SlippageExceeded: If the quote violates limit
            (plus everything quote_buy raises)
        """
        quote = self.quote_buy(curve, amount, config.fee_bps)

        if curve.buy_mode == BuyMode.EXACT_OUT:
            if quote.trader_sol > limit:
                raise SlippageExceeded(
                    f"Buy costs {quote.trader_sol} lamports, max is {limit}"
                )
        elif quote.token_amount < limit:
            raise SlippageExceeded(f"Buy yields {quote.token_amount} tokens, min is {limit}")

        curve_after = curve.with_reserves(
            virtual_sol_reserves=quote.swap.new_virtual_sol_reserves,
            virtual_token_reserves=quote.swap.new_virtual_token_reserves,
            real_sol_reserves=(S(curve.real_sol_reserves) + quote.sol_amount).to_u64(),
            real_token_reserves=(S(curve.real_token_reserves) - quote.token_amount).value,
        )
        transfers = (
            Transfer.sol(buyer, curve.address, quote.sol_amount),
            Transfer.sol(buyer, config.fee_recipient, quote.fees.fee),
            Transfer.tokens(curve.asset_id, curve.address, buyer, quote.token_amount),
        )

        logger.debug(
            "buy_planned",
            curve=curve.address[:12],
            mode=curve.buy_mode.value,
            tokens=quote.token_amount,
            sol=quote.sol_amount,
            fee=quote.fees.fee,
            clamped=quote.clamped,
        )
        return TradePlan(
            quote=quote, curve_before=curve, curve_after=curve_after, transfers=transfers
        )

    def plan_sell(
        self,
        curve: BondingCurve,
        config: GlobalConfig,
        seller: str,
        token_amount: int,
        min_sol_out: int,
    ) -> TradePlan:
        """Quote a sell, enforce min proceeds and stage the new curve.

        Raises:
            SellDisabled: If the deployment is buy-only
            SlippageExceeded: If net proceeds fall below min_sol_out
            (plus everything quote_sell raises)
        """
        if not config.curve_params.sell_enabled:
            raise SellDisabled("Selling back to the curve is disabled")

        quote = self.quote_sell(curve, token_amount, config.fee_bps)
        if quote.trader_sol < min_sol_out:
            raise SlippageExceeded(
                f"Sell yields {quote.trader_sol} lamports, min is {min_sol_out}"
            )

        curve_after = curve.with_reserves(
            virtual_sol_reserves=quote.swap.new_virtual_sol_reserves,
            virtual_token_reserves=quote.swap.new_virtual_token_reserves,
            real_sol_reserves=(S(curve.real_sol_reserves) - quote.sol_amount).value,
            real_token_reserves=(S(curve.real_token_reserves) + token_amount).to_u64(),
        )
        transfers = (
            Transfer.tokens(curve.asset_id, seller, curve.address, token_amount),
            Transfer.sol(curve.address, seller, quote.trader_sol),
            Transfer.sol(curve.address, config.fee_recipient, quote.fees.fee),
        )

        logger.debug(
            "sell_planned",
            curve=curve.address[:12],
            tokens=token_amount,
            sol=quote.sol_amount,
            fee=quote.fees.fee,
        )
        return TradePlan(
            quote=quote, curve_before=curve, curve_after=curve_after, transfers=transfers
        )


# Default planner instance
DEFAULT_TRADE_PLANNER = TradePlanner()
