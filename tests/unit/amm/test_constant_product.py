"""Tests for constant product pricing."""

import pytest

from launchpad.amm import ConstantProductCurve, constant_product
from launchpad.errors import InsufficientLiquidity, InvalidReserves, Overflow, ZeroAmount
from launchpad.safe_int import U64_MAX
from tests.helpers import EXAMPLE_COST, EXAMPLE_TOKENS_OUT

VS = 30_000_000_000
VT = 1_073_000_000_000_000
K = VS * VT


def ceil_div(a: int, b: int) -> int:
    return -(-a // b)


class TestBuyExactOut:
    """Tests for buying a fixed number of tokens."""

    def test_worked_example(self):
        """100,000 tokens at the default reserves cost 2,796,160 lamports."""
        swap = constant_product.buy_exact_out(EXAMPLE_TOKENS_OUT, VS, VT)

        assert swap.amount_in == EXAMPLE_COST
        assert swap.amount_out == EXAMPLE_TOKENS_OUT
        assert swap.new_virtual_token_reserves == VT - EXAMPLE_TOKENS_OUT
        assert swap.new_virtual_sol_reserves == VS + EXAMPLE_COST

    def test_cost_rounds_up(self):
        """New sol reserve is the ceiling of k / new token reserve."""
        tokens_out = 123_456_789
        swap = constant_product.buy_exact_out(tokens_out, VS, VT)

        assert swap.new_virtual_sol_reserves == ceil_div(K, VT - tokens_out)
        assert swap.new_invariant >= K

    def test_one_token_unit_still_costs(self):
        """A tiny buy costs at least one lamport."""
        swap = constant_product.buy_exact_out(1, VS, VT)
        assert swap.amount_in >= 1

    def test_entire_virtual_reserve_fails(self):
        """tokens_out >= Vt is rejected."""
        with pytest.raises(InsufficientLiquidity):
            constant_product.buy_exact_out(VT, VS, VT)
        with pytest.raises(InsufficientLiquidity):
            constant_product.buy_exact_out(VT + 1, VS, VT)

    def test_just_below_virtual_reserve(self):
        """tokens_out = Vt - 1 prices against a one-unit reserve."""
        swap = constant_product.buy_exact_out(999, 1_000, 1_000)
        assert swap.new_virtual_token_reserves == 1
        assert swap.new_virtual_sol_reserves == 1_000_000
        assert swap.amount_in == 999_000

    def test_new_sol_reserve_overflow(self):
        """A reserve that no longer fits u64 raises Overflow."""
        with pytest.raises(Overflow):
            constant_product.buy_exact_out(U64_MAX - 1, U64_MAX, U64_MAX)

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            constant_product.buy_exact_out(0, VS, VT)

    def test_zero_reserves(self):
        with pytest.raises(InvalidReserves):
            constant_product.buy_exact_out(1, 0, VT)
        with pytest.raises(InvalidReserves):
            constant_product.buy_exact_out(1, VS, 0)


class TestBuyExactIn:
    """Tests for spending a fixed amount of sol."""

    def test_one_sol(self):
        """1 SOL at the default reserves buys 34,612,903,225,806 units."""
        swap = constant_product.buy_exact_in(1_000_000_000, VS, VT)

        assert swap.amount_in == 1_000_000_000
        assert swap.amount_out == 34_612_903_225_806
        assert swap.new_virtual_sol_reserves == 31_000_000_000
        assert swap.new_invariant >= K

    def test_tokens_round_down(self):
        """New token reserve is the ceiling of k / new sol reserve."""
        sol_in = 987_654_321
        swap = constant_product.buy_exact_in(sol_in, VS, VT)
        assert swap.amount_out == VT - ceil_div(K, VS + sol_in)

    def test_dust_can_buy_nothing(self):
        """On an expensive curve one lamport buys zero tokens."""
        swap = constant_product.buy_exact_in(1, 10**12, 10**6)
        assert swap.amount_out == 0

    def test_sol_reserve_overflow(self):
        with pytest.raises(Overflow):
            constant_product.buy_exact_in(U64_MAX, VS, VT)

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            constant_product.buy_exact_in(0, VS, VT)


class TestSellExactIn:
    """Tests for selling a fixed number of tokens."""

    def test_sell_after_buy_returns_less(self):
        """Buying then selling the same tokens never profits the trader."""
        buy = constant_product.buy_exact_out(EXAMPLE_TOKENS_OUT, VS, VT)
        sell = constant_product.sell_exact_in(
            EXAMPLE_TOKENS_OUT, buy.new_virtual_sol_reserves, buy.new_virtual_token_reserves
        )

        assert sell.amount_out == 2_796_159
        assert sell.amount_out < buy.amount_in
        assert sell.new_virtual_token_reserves == VT

    def test_sol_out_rounds_down(self):
        tokens_in = 55_555_555_555
        swap = constant_product.sell_exact_in(tokens_in, VS, VT)
        assert swap.amount_out == VS * tokens_in // (VT + tokens_in)
        assert swap.new_invariant >= K

    def test_dust_sell_yields_zero(self):
        """One token unit is worth less than a lamport at the default price."""
        swap = constant_product.sell_exact_in(1, VS, VT)
        assert swap.amount_out == 0

    def test_token_reserve_overflow(self):
        with pytest.raises(Overflow):
            constant_product.sell_exact_in(U64_MAX, VS, VT)

    def test_zero_amount(self):
        with pytest.raises(ZeroAmount):
            constant_product.sell_exact_in(0, VS, VT)


class TestSpotPrice:
    """Tests for the marginal price."""

    def test_exact_fraction(self):
        price = ConstantProductCurve().spot_price(VS, VT)
        assert price.numerator * VT == price.denominator * VS

    def test_zero_reserves(self):
        with pytest.raises(InvalidReserves):
            constant_product.spot_price(VS, 0)
