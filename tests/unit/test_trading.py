"""Tests for trade planning."""

import pytest

from launchpad.errors import (
    InsufficientLiquidity,
    SellDisabled,
    SlippageExceeded,
    ZeroAmount,
)
from launchpad.fees import TradeSide
from launchpad.ledger import AssetKind
from launchpad.models.curve import BuyMode
from launchpad.trading import DEFAULT_TRADE_PLANNER
from tests.helpers import (
    BUYER,
    EXAMPLE_COST,
    EXAMPLE_FEE,
    EXAMPLE_TOKENS_OUT,
    EXAMPLE_TOTAL,
    FEE_RECIPIENT,
    SELLER,
    SOL,
    make_config,
    make_curve,
)

planner = DEFAULT_TRADE_PLANNER


class TestQuoteBuy:
    """Tests for buy quotes."""

    def test_exact_out_worked_example(self):
        quote = planner.quote_buy(make_curve(), EXAMPLE_TOKENS_OUT, 100)

        assert quote.side == TradeSide.BUY
        assert quote.token_amount == EXAMPLE_TOKENS_OUT
        assert quote.sol_amount == EXAMPLE_COST
        assert quote.fees.fee == EXAMPLE_FEE
        assert quote.trader_sol == EXAMPLE_TOTAL
        assert not quote.clamped

    def test_exact_out_beyond_real_reserves(self):
        """Virtual depth does not let a buyer take more than the real tokens."""
        curve = make_curve(real_token_reserves=1_000)
        with pytest.raises(InsufficientLiquidity):
            planner.quote_buy(curve, 1_001, 100)

    def test_sold_out_curve(self):
        with pytest.raises(InsufficientLiquidity):
            planner.quote_buy(make_curve(real_token_reserves=0), 1, 100)

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            planner.quote_buy(make_curve(), 0, 100)

    def test_exact_in(self):
        curve = make_curve(buy_mode=BuyMode.EXACT_IN)
        quote = planner.quote_buy(curve, SOL, 100)

        assert quote.sol_amount == SOL
        assert quote.token_amount == 34_612_903_225_806
        assert quote.fees.fee == SOL // 100

    def test_exact_in_clamps_final_buy(self):
        """Overshooting the last tokens buys exactly what is left, repriced."""
        curve = make_curve(buy_mode=BuyMode.EXACT_IN, real_token_reserves=1_000_000)
        quote = planner.quote_buy(curve, 100 * SOL, 100)

        assert quote.clamped
        assert quote.token_amount == 1_000_000
        assert quote.sol_amount < 100 * SOL

    def test_exact_in_dust(self):
        curve = make_curve(
            buy_mode=BuyMode.EXACT_IN,
            virtual_sol_reserves=10**12,
            virtual_token_reserves=10**6,
            real_token_reserves=10**5,
        )
        with pytest.raises(ZeroAmount):
            planner.quote_buy(curve, 1, 100)


class TestQuoteSell:
    """Tests for sell quotes."""

    def test_sell_deducts_fee(self):
        curve = make_curve(
            virtual_sol_reserves=30_000_000_000 + EXAMPLE_COST,
            virtual_token_reserves=1_073_000_000_000_000 - EXAMPLE_TOKENS_OUT,
            real_token_reserves=793_100_000_000_000 - EXAMPLE_TOKENS_OUT,
            real_sol_reserves=EXAMPLE_COST,
        )
        quote = planner.quote_sell(curve, EXAMPLE_TOKENS_OUT, 100)

        assert quote.sol_amount == 2_796_159
        assert quote.fees.fee == 27_961
        assert quote.trader_sol == 2_796_159 - 27_961

    def test_sell_more_than_real_sol(self):
        """Proceeds are capped by the sol the curve actually holds."""
        curve = make_curve(real_sol_reserves=10)
        with pytest.raises(InsufficientLiquidity):
            planner.quote_sell(curve, EXAMPLE_TOKENS_OUT, 100)

    def test_dust_sell(self):
        with pytest.raises(ZeroAmount):
            planner.quote_sell(make_curve(real_sol_reserves=SOL), 1, 100)


class TestPlanBuy:
    """Tests for staged buys."""

    def test_transfers_and_reserves(self):
        curve = make_curve()
        plan = planner.plan_buy(curve, make_config(), BUYER, EXAMPLE_TOKENS_OUT, EXAMPLE_TOTAL)

        assert plan.curve_before is curve
        assert plan.curve_after.real_sol_reserves == EXAMPLE_COST
        assert plan.curve_after.real_token_reserves == curve.real_token_reserves - EXAMPLE_TOKENS_OUT
        assert plan.curve_after.invariant >= curve.invariant

        sol_to_vault, fee, tokens = plan.transfers
        assert (sol_to_vault.source, sol_to_vault.destination) == (BUYER, curve.address)
        assert sol_to_vault.amount == EXAMPLE_COST
        assert (fee.destination, fee.amount) == (FEE_RECIPIENT, EXAMPLE_FEE)
        assert tokens.kind == AssetKind.TOKEN
        assert (tokens.source, tokens.destination) == (curve.address, BUYER)
        assert tokens.amount == EXAMPLE_TOKENS_OUT

    def test_max_cost_exceeded(self):
        with pytest.raises(SlippageExceeded):
            planner.plan_buy(make_curve(), make_config(), BUYER, EXAMPLE_TOKENS_OUT, EXAMPLE_TOTAL - 1)

    def test_min_tokens_not_met(self):
        curve = make_curve(buy_mode=BuyMode.EXACT_IN)
        with pytest.raises(SlippageExceeded):
            planner.plan_buy(curve, make_config(), BUYER, SOL, 34_612_903_225_807)

    def test_min_tokens_met_exactly(self):
        curve = make_curve(buy_mode=BuyMode.EXACT_IN)
        plan = planner.plan_buy(curve, make_config(), BUYER, SOL, 34_612_903_225_806)
        assert plan.quote.token_amount == 34_612_903_225_806


class TestPlanSell:
    """Tests for staged sells."""

    def test_transfers_and_reserves(self):
        curve = make_curve(real_sol_reserves=SOL)
        plan = planner.plan_sell(curve, make_config(), SELLER, EXAMPLE_TOKENS_OUT, 0)

        assert plan.curve_after.real_sol_reserves == SOL - plan.quote.sol_amount
        assert plan.curve_after.real_token_reserves == curve.real_token_reserves + EXAMPLE_TOKENS_OUT

        tokens_in, net, fee = plan.transfers
        assert (tokens_in.source, tokens_in.destination) == (SELLER, curve.address)
        assert net.amount + fee.amount == plan.quote.sol_amount
        assert fee.destination == FEE_RECIPIENT

    def test_min_sol_out(self):
        curve = make_curve(real_sol_reserves=SOL)
        with pytest.raises(SlippageExceeded):
            planner.plan_sell(curve, make_config(), SELLER, EXAMPLE_TOKENS_OUT, SOL)

    def test_sell_disabled(self):
        curve = make_curve(real_sol_reserves=SOL)
        with pytest.raises(SellDisabled):
            planner.plan_sell(curve, make_config(sell_enabled=False), SELLER, EXAMPLE_TOKENS_OUT, 0)
