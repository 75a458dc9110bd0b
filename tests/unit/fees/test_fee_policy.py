"""Tests for the basis-point fee policy."""

import pytest

from launchpad.errors import FeeTooHigh, Overflow
from launchpad.fees import (
    DEFAULT_FEE_POLICY,
    BasisPointFeePolicy,
    FeeBreakdown,
    FeeConfig,
    TradeSide,
)
from launchpad.safe_int import U64_MAX
from tests.helpers import EXAMPLE_COST, EXAMPLE_FEE, EXAMPLE_TOTAL


class TestFeeFor:
    """Tests for the raw fee computation."""

    def test_worked_example(self):
        assert DEFAULT_FEE_POLICY.fee_for(EXAMPLE_COST, 100) == EXAMPLE_FEE

    def test_rounds_down(self):
        """99 lamports at 100 bps is below one lamport of fee."""
        assert DEFAULT_FEE_POLICY.fee_for(99, 100) == 0
        assert DEFAULT_FEE_POLICY.fee_for(100, 100) == 1

    def test_zero_rate(self):
        assert DEFAULT_FEE_POLICY.fee_for(1_000_000, 0) == 0

    def test_max_rate(self):
        assert DEFAULT_FEE_POLICY.fee_for(1_000_000, 1_000) == 100_000

    def test_largest_amount(self):
        """u64::MAX at the max rate stays within u64."""
        assert DEFAULT_FEE_POLICY.fee_for(U64_MAX, 1_000) == U64_MAX // 10

    def test_non_u64_amount(self):
        with pytest.raises(Overflow):
            DEFAULT_FEE_POLICY.fee_for(U64_MAX + 1, 100)


class TestValidateFeeBps:
    """Tests for governance bounds."""

    def test_bounds(self):
        assert DEFAULT_FEE_POLICY.validate_fee_bps(0) == 0
        assert DEFAULT_FEE_POLICY.validate_fee_bps(1_000) == 1_000

    def test_too_high(self):
        with pytest.raises(FeeTooHigh):
            DEFAULT_FEE_POLICY.validate_fee_bps(1_001)

    def test_negative(self):
        with pytest.raises(FeeTooHigh):
            DEFAULT_FEE_POLICY.validate_fee_bps(-1)

    def test_custom_max(self):
        policy = BasisPointFeePolicy(FeeConfig(max_fee_bps=50))
        with pytest.raises(FeeTooHigh):
            policy.validate_fee_bps(51)


class TestCompute:
    """Tests for FeeBreakdown on each side."""

    def test_buy_adds_fee(self):
        fees = DEFAULT_FEE_POLICY.compute(TradeSide.BUY, EXAMPLE_COST, 100)

        assert fees.fee == EXAMPLE_FEE
        assert fees.trader_amount == EXAMPLE_TOTAL
        assert fees.has_fee

    def test_sell_deducts_fee(self):
        fees = DEFAULT_FEE_POLICY.compute(TradeSide.SELL, 1_000_000, 100)

        assert fees.fee == 10_000
        assert fees.trader_amount == 990_000

    def test_buy_total_overflow(self):
        """Cost plus fee past u64::MAX raises Overflow."""
        with pytest.raises(Overflow):
            DEFAULT_FEE_POLICY.compute(TradeSide.BUY, U64_MAX, 100)

    def test_breakdown_without_fee(self):
        fees = FeeBreakdown(side=TradeSide.BUY, quoted=50, fee=0, fee_bps=0)
        assert not fees.has_fee
        assert fees.trader_amount == 50
