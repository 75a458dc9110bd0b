"""Pytest configuration and fixtures."""

import pytest

from launchpad.ledger import InMemoryLedger
from launchpad.migration import InMemoryVenue
from launchpad.models.curve import BondingCurve
from launchpad.program import LaunchpadProgram
from tests.helpers import BUYER, FUNDED_BALANCE, SELLER, FakeClock, create_curve, make_program


@pytest.fixture
def clock() -> FakeClock:
    """Fixed clock that tests can advance."""
    return FakeClock()


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger with BUYER and SELLER funded."""
    ledger = InMemoryLedger()
    ledger.deposit_sol(BUYER, FUNDED_BALANCE)
    ledger.deposit_sol(SELLER, FUNDED_BALANCE)
    return ledger


@pytest.fixture
def venue() -> InMemoryVenue:
    return InMemoryVenue()


@pytest.fixture
def program(ledger: InMemoryLedger, venue: InMemoryVenue, clock: FakeClock) -> LaunchpadProgram:
    """Default program (exact-out buys, sold-out graduation, 100 bps)."""
    program, _ = make_program(ledger=ledger, venue=venue, clock=clock)
    return program


@pytest.fixture
def curve(program: LaunchpadProgram) -> BondingCurve:
    """A freshly created curve on the default program."""
    return create_curve(program)
