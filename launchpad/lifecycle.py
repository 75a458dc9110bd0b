"""Lifecycle state machine for bonding curves.

TRADING -> COMPLETE -> MIGRATED, never backwards. Which event completes a
curve is a deployment choice (GraduationPolicy); exactly one trigger is
active per controller.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Protocol

import structlog

from launchpad.errors import AlreadyMigrated, CurveComplete, NotComplete
from launchpad.models.config import CurveParams, GraduationPolicy
from launchpad.models.curve import BondingCurve, CompletionSnapshot, LifecycleState

logger = structlog.get_logger()


class GraduationTrigger(Protocol):
    """Decides whether a post-buy curve has reached completion."""

    def should_complete(self, curve: BondingCurve) -> bool: ...


class SoldOutTrigger:
    """Complete when the curve's real token reserves reach zero."""

    def should_complete(self, curve: BondingCurve) -> bool:
        return curve.real_token_reserves == 0

    def __repr__(self) -> str:
        return "SoldOutTrigger()"


class ThresholdTrigger:
    """Complete once real sol reserves reach a fixed amount."""

    def __init__(self, threshold: int) -> None:
        if threshold <= 0:
            raise ValueError(f"Graduation threshold must be positive, got {threshold}")
        self.threshold = threshold

    def should_complete(self, curve: BondingCurve) -> bool:
        return curve.real_sol_reserves >= self.threshold

    def __repr__(self) -> str:
        return f"ThresholdTrigger(threshold={self.threshold})"


def trigger_for(params: CurveParams) -> GraduationTrigger:
    """Build the graduation trigger selected by the deployment parameters."""
    if params.graduation == GraduationPolicy.THRESHOLD:
        return ThresholdTrigger(params.graduation_threshold)
    return SoldOutTrigger()


class LifecycleController:
    """Enforces forward-only transitions and the completion trigger.

    The controller never mutates a curve; every transition returns a new
    value for the caller to commit.
    """

    def __init__(self, trigger: GraduationTrigger) -> None:
        self.trigger = trigger

    def ensure_tradable(self, curve: BondingCurve) -> None:
        """Reject trading on a curve that has left TRADING.

        Raises:
            CurveComplete: If the curve has graduated
            AlreadyMigrated: If the curve has been migrated
        """
        if curve.state == LifecycleState.COMPLETE:
            raise CurveComplete(f"Curve {curve.address[:12]} is complete; trading is closed")
        if curve.state == LifecycleState.MIGRATED:
            raise AlreadyMigrated(f"Curve {curve.address[:12]} has migrated; trading is closed")

    def ensure_migratable(self, curve: BondingCurve) -> CompletionSnapshot:
        """Check that the curve is COMPLETE and return its frozen snapshot.

        Raises:
            NotComplete: If the curve is still trading
            AlreadyMigrated: If the handoff already happened
        """
        if curve.state == LifecycleState.TRADING:
            raise NotComplete(f"Curve {curve.address[:12]} is still trading")
        if curve.state == LifecycleState.MIGRATED:
            raise AlreadyMigrated(f"Curve {curve.address[:12]} is already migrated")
        if curve.completion is None:
            # COMPLETE is only ever entered through complete()
            raise NotComplete(f"Curve {curve.address[:12]} has no completion snapshot")
        return curve.completion

    def apply_trigger(self, curve: BondingCurve, now: int) -> BondingCurve:
        """Complete the curve if the trigger fires, else return it unchanged."""
        if curve.state != LifecycleState.TRADING or not self.trigger.should_complete(curve):
            return curve
        return self.complete(curve, now)

    def complete(self, curve: BondingCurve, now: int) -> BondingCurve:
        """TRADING -> COMPLETE, freezing the reserves for migration."""
        self.ensure_tradable(curve)
        snapshot = CompletionSnapshot(
            real_sol_reserves=curve.real_sol_reserves,
            real_token_reserves=curve.real_token_reserves,
            virtual_sol_reserves=curve.virtual_sol_reserves,
            virtual_token_reserves=curve.virtual_token_reserves,
            completed_at=now,
        )
        logger.info(
            "curve_completed",
            curve=curve.address[:12],
            trigger=repr(self.trigger),
            real_sol_reserves=curve.real_sol_reserves,
            real_token_reserves=curve.real_token_reserves,
        )
        return replace(curve, state=LifecycleState.COMPLETE, completion=snapshot)

    def mark_migrated(self, curve: BondingCurve, now: int) -> BondingCurve:
        """COMPLETE -> MIGRATED."""
        self.ensure_migratable(curve)
        return replace(curve, state=LifecycleState.MIGRATED, migrated_at=now)
