"""Linear token vesting with a cliff.

A creator locks tokens into a schedule keyed by (asset, beneficiary). The
locked tokens sit in the schedule's own ledger account and are released
linearly between start_time and end_time, with nothing claimable before
cliff_time.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

import structlog

from launchpad.constants import VESTING_SEED
from launchpad.errors import (
    CliffNotReached,
    InvalidVestingSchedule,
    NothingToClaim,
    VestingScheduleExists,
    VestingScheduleNotFound,
)
from launchpad.ledger import LedgerGateway
from launchpad.models.types import derive_address
from launchpad.safe_int import S, U64_MAX

logger = structlog.get_logger()


def vesting_address_for(asset_id: str, beneficiary: str) -> str:
    return derive_address(VESTING_SEED, asset_id, beneficiary)


@dataclass(frozen=True)
class VestingSchedule:
    """Locked allocation released linearly over [start_time, end_time].

    Attributes:
        address: Derived schedule address (also its token account)
        beneficiary: Identity entitled to the released tokens
        asset_id: Token being vested
        total_amount: Tokens locked at initialization
        released_amount: Tokens already claimed
        start_time: Vesting start (unix seconds)
        end_time: Fully vested at or after this time
        cliff_time: Nothing is claimable before this time
    """

    address: str
    beneficiary: str
    asset_id: str
    total_amount: int
    released_amount: int
    start_time: int
    end_time: int
    cliff_time: int

    def vested_amount(self, now: int) -> int:
        """Tokens vested at time now, claimed or not.

        0 before the cliff, total_amount from end_time on, and
        floor(total * elapsed / duration) in between.
        """
        if now < self.cliff_time:
            return 0
        if now >= self.end_time:
            return self.total_amount
        elapsed = now - self.start_time
        duration = self.end_time - self.start_time
        return (S(self.total_amount) * elapsed // duration).to_u64()

    def claimable(self, now: int) -> int:
        """Vested tokens not yet released."""
        return max(self.vested_amount(now) - self.released_amount, 0)

    @property
    def remaining(self) -> int:
        return self.total_amount - self.released_amount


def validate_schedule(total_amount: int, start_time: int, end_time: int, cliff_time: int) -> None:
    """Check schedule times and amount.

    Raises:
        InvalidVestingSchedule: If end <= start, the cliff is outside
            [start, end], or the amount is not a positive u64
    """
    if end_time <= start_time:
        raise InvalidVestingSchedule(f"end_time {end_time} must be after start_time {start_time}")
    if not start_time <= cliff_time <= end_time:
        raise InvalidVestingSchedule(
            f"cliff_time {cliff_time} must lie within [{start_time}, {end_time}]"
        )
    if not 0 < total_amount <= U64_MAX:
        raise InvalidVestingSchedule(f"total_amount must be a positive u64, got {total_amount}")


class VestingService:
    """Creates schedules and releases vested tokens through the ledger.

    Args:
        ledger: Custody collaborator holding the locked tokens
        clock: Returns unix seconds; injectable for tests
    """

    def __init__(self, ledger: LedgerGateway, clock: Callable[[], int] | None = None) -> None:
        self.ledger = ledger
        self._clock = clock or (lambda: int(time.time()))
        self._schedules: dict[str, VestingSchedule] = {}
        self._lock = threading.Lock()

    def get(self, asset_id: str, beneficiary: str) -> VestingSchedule:
        """Return the schedule for (asset, beneficiary).

        Raises:
            VestingScheduleNotFound: If no schedule exists
        """
        address = vesting_address_for(asset_id, beneficiary)
        schedule = self._schedules.get(address)
        if schedule is None:
            raise VestingScheduleNotFound(f"No vesting schedule at {address}")
        return schedule

    def initialize(
        self,
        beneficiary: str,
        asset_id: str,
        total_amount: int,
        start_time: int,
        end_time: int,
        cliff_time: int,
    ) -> VestingSchedule:
        """Lock total_amount of the beneficiary's tokens into a new schedule.

        Raises:
            InvalidVestingSchedule: On bad times or amount
            VestingScheduleExists: If the beneficiary already has a schedule
                for this asset
            InsufficientBalance: If the beneficiary cannot fund the lock
        """
        validate_schedule(total_amount, start_time, end_time, cliff_time)
        address = vesting_address_for(asset_id, beneficiary)

        with self._lock:
            if address in self._schedules:
                raise VestingScheduleExists(
                    f"{beneficiary[:12]} already has a schedule for {asset_id}"
                )
            with self.ledger.atomic():
                self.ledger.transfer_tokens(asset_id, beneficiary, address, total_amount)
            schedule = VestingSchedule(
                address=address,
                beneficiary=beneficiary,
                asset_id=asset_id,
                total_amount=total_amount,
                released_amount=0,
                start_time=start_time,
                end_time=end_time,
                cliff_time=cliff_time,
            )
            self._schedules[address] = schedule

        logger.info(
            "vesting_initialized",
            schedule=address[:12],
            asset_id=asset_id,
            total_amount=total_amount,
            duration=end_time - start_time,
        )
        return schedule

    def claim(self, beneficiary: str, asset_id: str) -> int:
        """Release every vested, unclaimed token to the beneficiary.

        Returns:
            Tokens released by this claim

        Raises:
            VestingScheduleNotFound: If no schedule exists
            CliffNotReached: If called before the cliff
            NothingToClaim: If everything vested so far was already released
        """
        now = self._clock()
        with self._lock:
            schedule = self.get(asset_id, beneficiary)
            if now < schedule.cliff_time:
                raise CliffNotReached(
                    f"Cliff at {schedule.cliff_time}, now {now}"
                )
            amount = schedule.claimable(now)
            if amount == 0:
                raise NothingToClaim(
                    f"Released {schedule.released_amount} of {schedule.total_amount}; "
                    "nothing new has vested"
                )
            with self.ledger.atomic():
                self.ledger.transfer_tokens(asset_id, schedule.address, beneficiary, amount)
            updated = replace(schedule, released_amount=schedule.released_amount + amount)
            self._schedules[schedule.address] = updated

        logger.info(
            "vesting_claimed",
            schedule=schedule.address[:12],
            amount=amount,
            released=updated.released_amount,
            total=updated.total_amount,
        )
        return amount
