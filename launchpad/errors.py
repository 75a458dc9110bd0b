"""Error taxonomy for the launchpad.

Every failure a caller can observe is a subclass of CurveError and belongs
to exactly one category. Callers can tell "price moved" (economic) apart
from "system misconfigured" (state / authorization) by the category alone.
"""

from typing import ClassVar


class CurveError(Exception):
    """Base error for all launchpad operations."""

    category: ClassVar[str] = "curve"


# --- Validation ---


class ValidationError(CurveError):
    """Request is malformed independent of curve state."""

    category: ClassVar[str] = "validation"


class MetadataTooLong(ValidationError):
    """Token name, symbol or uri exceeds its length limit."""

    pass


class ZeroAmount(ValidationError):
    """Trade amount must be greater than zero."""

    pass


class InvalidParameters(ValidationError):
    """Curve parameters are inconsistent or out of range."""

    pass


class FeeTooHigh(ValidationError):
    """Fee rate exceeds the governance maximum."""

    pass


class InvalidVestingSchedule(ValidationError):
    """Vesting times or amount are inconsistent."""

    pass


# --- State ---


class StateError(CurveError):
    """Operation is not allowed in the current lifecycle or config state."""

    category: ClassVar[str] = "state"


class Paused(StateError):
    """Trading and creation are halted by the config authority."""

    pass


class CurveComplete(StateError):
    """Curve has graduated; trading is closed."""

    pass


class AlreadyMigrated(StateError):
    """Curve liquidity has already been handed off."""

    pass


class NotComplete(StateError):
    """Curve has not graduated yet."""

    pass


class CurveAlreadyExists(StateError):
    """A curve is already registered for this asset."""

    pass


class CurveLocked(StateError):
    """Curve is held by an in-flight operation on this thread."""

    pass


class SellDisabled(StateError):
    """Deployment is buy-only."""

    pass


class HandoffFailed(StateError):
    """Liquidity venue or ledger rejected the migration handoff."""

    pass


class CliffNotReached(StateError):
    """Vesting cliff has not passed yet."""

    pass


class NothingToClaim(StateError):
    """No vested tokens are claimable."""

    pass


class VestingScheduleExists(StateError):
    """Beneficiary already has a schedule for this asset."""

    pass


# --- Economic ---


class EconomicError(CurveError):
    """Trade is well-formed but not executable at current reserves."""

    category: ClassVar[str] = "economic"


class SlippageExceeded(EconomicError):
    """Execution price is worse than the caller's bound."""

    pass


class InsufficientLiquidity(EconomicError):
    """Curve cannot supply the requested amount."""

    pass


class InvalidReserves(EconomicError):
    """Reserves are zero or otherwise unusable for pricing."""

    pass


class InsufficientBalance(EconomicError):
    """Ledger account cannot cover a transfer."""

    pass


# --- Arithmetic ---


class CurveArithmeticError(CurveError, ArithmeticError):
    """Overflow, underflow or division by zero in checked arithmetic."""

    category: ClassVar[str] = "arithmetic"


class Overflow(CurveArithmeticError):
    """Value does not fit the target integer width."""

    pass


class Underflow(CurveArithmeticError):
    """Subtraction would produce a negative result."""

    pass


class DivisionByZero(CurveArithmeticError):
    """Division or modulo by zero."""

    pass


# --- Authorization ---


class AuthorizationError(CurveError):
    """Caller lacks the required authority."""

    category: ClassVar[str] = "authorization"


class Unauthorized(AuthorizationError):
    """Caller is not the config authority."""

    pass


# --- Lookup ---


class NotFoundError(CurveError):
    """Base for lookups of records that do not exist."""

    category: ClassVar[str] = "not_found"


class CurveNotFound(NotFoundError):
    """No curve is registered at the given address."""

    pass


class VestingScheduleNotFound(NotFoundError):
    """No vesting schedule exists for the asset and beneficiary."""

    pass
