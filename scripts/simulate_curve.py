"""Simulate a curve from creation through graduation and migration.

Drives an in-memory program with a single buyer making equal-sized buys
until the curve completes, then migrates it and prints a summary of
prices, fees and the handoff record.

Usage:
    python -m scripts.simulate_curve --steps 20
    python -m scripts.simulate_curve --mode exact_in --graduation threshold
"""

import argparse
import logging

import structlog

from launchpad import analytics
from launchpad.constants import LAMPORTS_PER_SOL
from launchpad.ledger import InMemoryLedger
from launchpad.models.config import CurveParams, GlobalConfig, GraduationPolicy
from launchpad.models.curve import BuyMode
from launchpad.program import LaunchpadProgram

logger = structlog.get_logger()

AUTHORITY = "authority"
CREATOR = "creator"
BUYER = "buyer"


def simulate(
    steps: int,
    mode: BuyMode,
    graduation: GraduationPolicy,
    fee_bps: int,
) -> dict[str, object]:
    """Run one curve to migration and return summary figures."""
    ledger = InMemoryLedger()
    program = LaunchpadProgram(
        GlobalConfig(
            authority=AUTHORITY,
            fee_recipient=AUTHORITY,
            fee_bps=fee_bps,
            curve_params=CurveParams(buy_mode=mode, graduation=graduation),
        ),
        ledger=ledger,
    )
    curve = program.create(CREATOR, "SIM", "Simulated", "SIM", "https://example.invalid/sim")
    opening_price = analytics.price_in_sol(curve)

    # Enough to buy the whole curve several times over
    ledger.deposit_sol(BUYER, 1_000 * LAMPORTS_PER_SOL)
    token_step = max(curve.real_token_reserves // steps, 1)
    sol_step = max(analytics.progress(curve).sol_to_complete // steps, 1)

    buys = 0
    while curve.is_trading:
        if mode == BuyMode.EXACT_OUT:
            amount = min(token_step, curve.real_token_reserves)
            receipt = program.buy(BUYER, curve.address, amount, limit=ledger.sol_balance(BUYER))
        else:
            receipt = program.buy(BUYER, curve.address, sol_step, limit=0)
        curve = receipt.curve
        buys += 1
        logger.info(
            "simulated_buy",
            step=buys,
            tokens=receipt.quote.token_amount,
            cost=receipt.quote.trader_sol,
            price_sol=str(analytics.price_in_sol(curve)),
            progress=str(analytics.progress(curve).percent),
        )

    migration = program.migrate(BUYER, curve.address)
    record = migration.record
    return {
        "buys": buys,
        "opening_price_sol": opening_price,
        "final_price_sol": analytics.price_in_sol(curve),
        "real_sol_raised": curve.real_sol_reserves,
        "fees_collected": ledger.sol_balance(AUTHORITY),
        "buyer_tokens": ledger.token_balance("SIM", BUYER),
        "pool": migration.pool,
        "pool_sol": record.sol_amount,
        "pool_tokens": record.token_amount,
        "price_scaled": record.price_scaled,
    }


def main() -> None:
    """Entry point for the curve simulation script."""
    parser = argparse.ArgumentParser(description="Simulate a bonding curve to migration")
    parser.add_argument("--steps", type=int, default=20, help="Number of equal buys")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in BuyMode],
        default=BuyMode.EXACT_OUT.value,
        help="Buy calling contract",
    )
    parser.add_argument(
        "--graduation",
        choices=[g.value for g in GraduationPolicy],
        default=GraduationPolicy.SOLD_OUT.value,
        help="Completion trigger",
    )
    parser.add_argument("--fee-bps", type=int, default=100, help="Trading fee in bps")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every buy")

    args = parser.parse_args()

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if args.verbose else logging.WARNING
        ),
    )

    summary = simulate(
        steps=args.steps,
        mode=BuyMode(args.mode),
        graduation=GraduationPolicy(args.graduation),
        fee_bps=args.fee_bps,
    )

    print("\nSimulation summary")
    print("=" * 40)
    for key, value in summary.items():
        print(f"{key:<20} {value}")


if __name__ == "__main__":
    main()
