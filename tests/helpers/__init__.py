"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Identities and common amounts
- factories: Program, config and curve factory functions
"""

from tests.helpers.constants import (
    ASSET_ID,
    AUTHORITY,
    BUYER,
    CREATOR,
    EXAMPLE_COST,
    EXAMPLE_FEE,
    EXAMPLE_TOKENS_OUT,
    EXAMPLE_TOTAL,
    FEE_RECIPIENT,
    FUNDED_BALANCE,
    NOW,
    OUTSIDER,
    SELLER,
    SOL,
    TOKEN,
)
from tests.helpers.factories import (
    FakeClock,
    create_curve,
    make_config,
    make_curve,
    make_program,
)

__all__ = [
    # Constants
    "ASSET_ID",
    "AUTHORITY",
    "BUYER",
    "CREATOR",
    "FEE_RECIPIENT",
    "OUTSIDER",
    "SELLER",
    "SOL",
    "TOKEN",
    "FUNDED_BALANCE",
    "NOW",
    "EXAMPLE_TOKENS_OUT",
    "EXAMPLE_COST",
    "EXAMPLE_FEE",
    "EXAMPLE_TOTAL",
    # Factories
    "FakeClock",
    "create_curve",
    "make_config",
    "make_curve",
    "make_program",
]
