"""Launchpad program: the create / trade / migrate / govern operations.

LaunchpadProgram is the entry point for every state-changing operation.
Each operation follows the same shape:

1. take a point-in-time GlobalConfig snapshot
2. open a curve transaction (per-curve lock, commit on clean exit)
3. validate, quote, check slippage, stage the new curve
4. execute ledger transfers inside ledger.atomic()
5. apply the completion trigger and stage the final curve

Any exception before the transaction exits discards the staged curve and
rolls back the ledger, so an operation is applied entirely or not at all.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from launchpad.auth import AuthorityVerifier
from launchpad.constants import (
    CURVE_SEED,
    MAX_NAME_LENGTH,
    MAX_SYMBOL_LENGTH,
    MAX_URI_LENGTH,
)
from launchpad.errors import (
    CurveAlreadyExists,
    HandoffFailed,
    InvalidParameters,
    MetadataTooLong,
    Paused,
    SellDisabled,
)
from launchpad.fees import DEFAULT_FEE_POLICY, BasisPointFeePolicy
from launchpad.ledger import InMemoryLedger, LedgerGateway, Transfer, execute_transfers
from launchpad.lifecycle import LifecycleController, trigger_for
from launchpad.migration import (
    InMemoryVenue,
    LiquidityVenue,
    MigrationRecord,
    build_migration_record,
)
from launchpad.models.config import CurveParams, GlobalConfig, GraduationPolicy
from launchpad.models.curve import BondingCurve, LifecycleState, TokenMetadata
from launchpad.models.types import derivation_seed, derive_address
from launchpad.store import ConfigStore, CurveStore
from launchpad.trading import TradePlanner, TradeQuote

logger = structlog.get_logger()


@dataclass(frozen=True)
class TradeReceipt:
    """Outcome of a committed buy or sell.

    curve_before is the curve the trade was priced against, read under the
    same lock that committed it.
    """

    quote: TradeQuote
    curve: BondingCurve
    curve_before: BondingCurve

    @property
    def completed(self) -> bool:
        """True if this trade graduated the curve."""
        return self.curve.state == LifecycleState.COMPLETE


@dataclass(frozen=True)
class MigrationReceipt:
    """Outcome of a committed migration."""

    record: MigrationRecord
    pool: str
    curve: BondingCurve


def curve_address_for(asset_id: str) -> str:
    """Derived address of the curve for an asset."""
    return derive_address(CURVE_SEED, asset_id)


class LaunchpadProgram:
    """Bonding curve launchpad over injectable collaborators.

    Args:
        config: Initial GlobalConfig (authority, fees, curve parameters)
        ledger: Custody collaborator. Defaults to an InMemoryLedger.
        venue: Migration venue. Defaults to an InMemoryVenue.
        store: Curve records. Defaults to an empty CurveStore.
        planner: Trade planner. Defaults to constant product + bps fees.
        fee_policy: Governance bounds on fee_bps.
        verifier: Authority capability check for config changes.
        clock: Returns unix seconds; injectable for tests.

    Raises:
        InvalidParameters / FeeTooHigh: If the initial config is invalid
    """

    def __init__(
        self,
        config: GlobalConfig,
        ledger: LedgerGateway | None = None,
        venue: LiquidityVenue | None = None,
        store: CurveStore | None = None,
        planner: TradePlanner | None = None,
        fee_policy: BasisPointFeePolicy | None = None,
        verifier: AuthorityVerifier | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.fee_policy = fee_policy or DEFAULT_FEE_POLICY
        self.fee_policy.validate_fee_bps(config.fee_bps)
        config.curve_params.validate()

        self.ledger: LedgerGateway = ledger if ledger is not None else InMemoryLedger()
        self.venue: LiquidityVenue = venue if venue is not None else InMemoryVenue()
        self.store = store if store is not None else CurveStore()
        self.planner = planner or TradePlanner(fee_policy=self.fee_policy)
        self.lifecycle = LifecycleController(trigger_for(config.curve_params))
        self._config_store = ConfigStore(config, verifier=verifier)
        self._clock = clock or (lambda: int(time.time()))

    # --- Queries ---

    @property
    def config(self) -> GlobalConfig:
        """Current GlobalConfig snapshot."""
        return self._config_store.snapshot()

    @property
    def config_address(self) -> str:
        return self._config_store.address

    def get_config(self) -> GlobalConfig:
        return self._config_store.snapshot()

    def get_curve(self, address: str) -> BondingCurve:
        return self.store.get(address)

    def get_metadata(self, address: str) -> TokenMetadata | None:
        return self.store.metadata(address)

    def quote_buy(self, address: str, amount: int) -> TradeQuote:
        """Price a buy without changing anything."""
        curve = self.store.get(address)
        self.lifecycle.ensure_tradable(curve)
        return self.planner.quote_buy(curve, amount, self.config.fee_bps)

    def quote_sell(self, address: str, token_amount: int) -> TradeQuote:
        """Price a sell without changing anything."""
        config = self._config_store.snapshot()
        if not config.curve_params.sell_enabled:
            raise SellDisabled("Selling back to the curve is disabled")
        curve = self.store.get(address)
        self.lifecycle.ensure_tradable(curve)
        return self.planner.quote_sell(curve, token_amount, config.fee_bps)

    # --- Operations ---

    def create(
        self,
        creator: str,
        asset_id: str,
        name: str,
        symbol: str,
        uri: str,
    ) -> BondingCurve:
        """List a new asset on a fresh curve.

        Mints the fixed total supply: the creator allocation to the creator
        and the rest to the curve vault.

        Raises:
            Paused: If the deployment is paused
            MetadataTooLong: If name, symbol or uri exceed their limits
            InvalidParameters: If creator or asset_id is empty
            CurveAlreadyExists: If the asset already has a curve
        """
        config = self._config_store.snapshot()
        _ensure_not_paused(config, "create")
        _validate_metadata(name, symbol, uri)
        if not creator or not asset_id:
            raise InvalidParameters("creator and asset_id are required")

        params = config.curve_params
        address = curve_address_for(asset_id)
        now = self._clock()

        with self.store.transaction(address) as tx:
            if tx.exists:
                raise CurveAlreadyExists(f"Asset {asset_id} already has a curve")

            curve = BondingCurve(
                address=address,
                asset_id=asset_id,
                creator=creator,
                virtual_token_reserves=params.initial_virtual_token_reserves,
                virtual_sol_reserves=params.initial_virtual_sol_reserves,
                real_token_reserves=params.initial_real_token_reserves,
                real_sol_reserves=0,
                token_total_supply=params.token_total_supply,
                state=LifecycleState.TRADING,
                created_at=now,
                seed=derivation_seed(CURVE_SEED, asset_id),
                buy_mode=params.buy_mode,
                creator_allocation=params.creator_allocation,
                migration_token_reserve=params.migration_token_reserve,
            )
            tx.stage(curve, TokenMetadata(name=name, symbol=symbol, uri=uri))

            with self.ledger.atomic():
                if curve.creator_allocation > 0:
                    self.ledger.mint_tokens(asset_id, creator, curve.creator_allocation)
                self.ledger.mint_tokens(
                    asset_id, address, curve.token_total_supply - curve.creator_allocation
                )

        logger.info(
            "curve_created",
            curve=address[:12],
            asset_id=asset_id,
            creator=creator[:12],
            symbol=symbol,
            buy_mode=curve.buy_mode.value,
            creator_allocation=curve.creator_allocation,
        )
        return curve

    def buy(self, buyer: str, address: str, amount: int, limit: int) -> TradeReceipt:
        """Buy tokens from a curve.

        Args:
            buyer: Buyer identity (pays sol, receives tokens)
            address: Curve address
            amount: Tokens out (EXACT_OUT curves) or pre-fee sol in (EXACT_IN)
            limit: Max total sol cost (EXACT_OUT) or min tokens out (EXACT_IN)

        Raises:
            Paused, CurveComplete, AlreadyMigrated, ZeroAmount,
            InsufficientLiquidity, SlippageExceeded, InsufficientBalance,
            CurveArithmeticError, CurveNotFound, CurveLocked
        """
        config = self._config_store.snapshot()
        _ensure_not_paused(config, "buy")

        with self.store.transaction(address) as tx:
            curve = tx.curve
            self.lifecycle.ensure_tradable(curve)
            plan = self.planner.plan_buy(curve, config, buyer, amount, limit)
            tx.stage(plan.curve_after)

            with self.ledger.atomic():
                execute_transfers(self.ledger, plan.transfers)
            final = self.lifecycle.apply_trigger(plan.curve_after, self._clock())
            tx.stage(final)

        logger.info(
            "buy_executed",
            curve=address[:12],
            buyer=buyer[:12],
            tokens=plan.quote.token_amount,
            sol=plan.quote.sol_amount,
            fee=plan.quote.fees.fee,
            completed=final.state == LifecycleState.COMPLETE,
        )
        return TradeReceipt(quote=plan.quote, curve=final, curve_before=plan.curve_before)

    def sell(self, seller: str, address: str, token_amount: int, min_sol_out: int) -> TradeReceipt:
        """Sell tokens back to a curve.

        Raises:
            Paused, SellDisabled, CurveComplete, AlreadyMigrated, ZeroAmount,
            InsufficientLiquidity, SlippageExceeded, InsufficientBalance,
            CurveArithmeticError, CurveNotFound, CurveLocked
        """
        config = self._config_store.snapshot()
        _ensure_not_paused(config, "sell")

        with self.store.transaction(address) as tx:
            curve = tx.curve
            self.lifecycle.ensure_tradable(curve)
            plan = self.planner.plan_sell(curve, config, seller, token_amount, min_sol_out)
            tx.stage(plan.curve_after)

            with self.ledger.atomic():
                execute_transfers(self.ledger, plan.transfers)

        logger.info(
            "sell_executed",
            curve=address[:12],
            seller=seller[:12],
            tokens=token_amount,
            sol=plan.quote.sol_amount,
            fee=plan.quote.fees.fee,
        )
        return TradeReceipt(
            quote=plan.quote, curve=plan.curve_after, curve_before=plan.curve_before
        )

    def migrate(self, caller: str, address: str) -> MigrationReceipt:
        """Hand a completed curve's frozen liquidity to the venue.

        Permissionless: any caller may trigger it once the curve is
        COMPLETE. Not blocked by pause.

        Raises:
            NotComplete: If the curve is still trading
            AlreadyMigrated: If the curve was already migrated
            HandoffFailed: If the venue or the ledger rejects the handoff
        """
        with self.store.transaction(address) as tx:
            curve = tx.curve
            snapshot = self.lifecycle.ensure_migratable(curve)
            record = build_migration_record(curve, snapshot)
            migrated = self.lifecycle.mark_migrated(curve, self._clock())
            tx.stage(migrated)

            try:
                pool = self.venue.seed(record)
            except Exception as exc:
                logger.warning("migration_seed_failed", curve=address[:12], error=str(exc))
                raise HandoffFailed(f"Venue rejected migration of {address[:12]}") from exc

            transfers = (
                Transfer.sol(address, pool, record.sol_amount),
                Transfer.tokens(curve.asset_id, address, pool, record.token_amount),
            )
            try:
                with self.ledger.atomic():
                    execute_transfers(self.ledger, transfers)
            except Exception as exc:
                self.venue.cancel(pool)
                logger.warning("migration_funding_failed", curve=address[:12], error=str(exc))
                raise HandoffFailed(f"Could not fund pool for {address[:12]}") from exc

        logger.info(
            "curve_migrated",
            curve=address[:12],
            caller=caller[:12],
            pool=pool[:12],
            sol_amount=record.sol_amount,
            token_amount=record.token_amount,
            price_scaled=record.price_scaled,
        )
        return MigrationReceipt(record=record, pool=pool, curve=migrated)

    def update_config(
        self,
        caller: str,
        fee_bps: int | None = None,
        fee_recipient: str | None = None,
        new_authority: str | None = None,
    ) -> GlobalConfig:
        """Change fee parameters or hand over authority.

        Raises:
            Unauthorized: If caller is not the authority
            FeeTooHigh: If fee_bps exceeds the governance maximum
            InvalidParameters: If an identity is empty
        """
        changes: dict[str, object] = {}
        if fee_bps is not None:
            changes["fee_bps"] = fee_bps
        if fee_recipient is not None:
            changes["fee_recipient"] = fee_recipient
        if new_authority is not None:
            changes["authority"] = new_authority

        return self._config_store.update(
            caller, "update_config", validate=self._validate_config, **changes
        )

    def set_pause(self, caller: str, paused: bool) -> GlobalConfig:
        """Halt or resume creation and trading.

        Raises:
            Unauthorized: If caller is not the authority
        """
        return self._config_store.update(caller, "set_pause", paused=paused)

    def _validate_config(self, config: GlobalConfig) -> None:
        self.fee_policy.validate_fee_bps(config.fee_bps)
        if not config.fee_recipient or not config.authority:
            raise InvalidParameters("authority and fee_recipient must be non-empty")


def _ensure_not_paused(config: GlobalConfig, operation: str) -> None:
    if config.paused:
        logger.info("operation_rejected_paused", operation=operation)
        raise Paused(f"{operation} is paused")


def _validate_metadata(name: str, symbol: str, uri: str) -> None:
    limits = (
        ("name", name, MAX_NAME_LENGTH),
        ("symbol", symbol, MAX_SYMBOL_LENGTH),
        ("uri", uri, MAX_URI_LENGTH),
    )
    for field_name, value, limit in limits:
        if len(value) > limit:
            raise MetadataTooLong(f"{field_name} is {len(value)} chars, max {limit}")


# Default program instance, configured from the environment on first use
_default_program: LaunchpadProgram | None = None
_default_lock = threading.Lock()


def _create_default_program() -> LaunchpadProgram:
    """Create the default program from environment variables.

    - LAUNCHPAD_AUTHORITY: Config authority identity (default: "authority")
    - LAUNCHPAD_FEE_RECIPIENT: Fee recipient (default: the authority)
    - LAUNCHPAD_FEE_BPS: Trading fee in bps (default: 100)
    - LAUNCHPAD_GRADUATION: "sold_out" or "threshold" (default: sold_out)
    """
    authority = os.environ.get("LAUNCHPAD_AUTHORITY", "authority")
    fee_recipient = os.environ.get("LAUNCHPAD_FEE_RECIPIENT", authority)
    fee_bps = int(os.environ.get("LAUNCHPAD_FEE_BPS", "100"))
    graduation = GraduationPolicy(os.environ.get("LAUNCHPAD_GRADUATION", "sold_out"))

    logger.info(
        "default_program_created",
        authority=authority[:12],
        fee_bps=fee_bps,
        graduation=graduation.value,
    )
    return LaunchpadProgram(
        GlobalConfig(
            authority=authority,
            fee_recipient=fee_recipient,
            fee_bps=fee_bps,
            curve_params=CurveParams(graduation=graduation),
        )
    )


def get_default_program() -> LaunchpadProgram:
    """Return the process-wide program, creating it on first call."""
    global _default_program
    with _default_lock:
        if _default_program is None:
            _default_program = _create_default_program()
        return _default_program
