"""Persisted state: curve records and the global config singleton.

Each curve is written by one serialized operation at a time.
CurveStore.transaction() holds a per-address lock for the whole operation
and commits the staged value only if the block exits cleanly. A second
transaction on the same address from the same thread (a re-entrant call
made from inside a ledger or venue callback) is rejected instead of
blocking or observing stale reserves.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from launchpad.auth import AuthorityVerifier, require_authority
from launchpad.constants import CONFIG_SEED
from launchpad.errors import CurveLocked, CurveNotFound
from launchpad.models.config import GlobalConfig
from launchpad.models.curve import BondingCurve, TokenMetadata
from launchpad.models.types import derive_address

logger = structlog.get_logger()

CONFIG_ADDRESS = derive_address(CONFIG_SEED)


class CurveTransaction:
    """Staging area for one operation on one curve."""

    def __init__(self, address: str, current: BondingCurve | None) -> None:
        self.address = address
        self.current = current
        self._staged: BondingCurve | None = None
        self._metadata: TokenMetadata | None = None

    @property
    def curve(self) -> BondingCurve:
        """Latest value: staged if any, else the committed one.

        Raises:
            CurveNotFound: If no curve exists at this address
        """
        if self._staged is not None:
            return self._staged
        if self.current is None:
            raise CurveNotFound(f"No curve at {self.address}")
        return self.current

    @property
    def exists(self) -> bool:
        return self.current is not None

    def stage(self, curve: BondingCurve, metadata: TokenMetadata | None = None) -> None:
        if curve.address != self.address:
            raise ValueError(f"Staged curve {curve.address} does not match {self.address}")
        self._staged = curve
        if metadata is not None:
            self._metadata = metadata


class CurveStore:
    """In-memory curve records keyed by derived address.

    Records are never deleted.
    """

    def __init__(self) -> None:
        self._curves: dict[str, BondingCurve] = {}
        self._metadata: dict[str, TokenMetadata] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._held = threading.local()

    def get(self, address: str) -> BondingCurve:
        """Return the committed curve at address.

        Raises:
            CurveNotFound: If no curve exists at address
        """
        curve = self._curves.get(address)
        if curve is None:
            raise CurveNotFound(f"No curve at {address}")
        return curve

    def metadata(self, address: str) -> TokenMetadata | None:
        return self._metadata.get(address)

    def __contains__(self, address: object) -> bool:
        return address in self._curves

    def __len__(self) -> int:
        return len(self._curves)

    @contextmanager
    def transaction(self, address: str) -> Iterator[CurveTransaction]:
        """Serialize an operation on one curve.

        Yields:
            CurveTransaction to read and stage the curve

        Raises:
            CurveLocked: If this thread already holds the curve
        """
        held = self._held_addresses()
        if address in held:
            logger.warning("curve_reentry_rejected", curve=address[:12])
            raise CurveLocked(f"Curve {address[:12]} is locked by an in-flight operation")

        lock = self._lock_for(address)
        with lock:
            held.add(address)
            try:
                tx = CurveTransaction(address, self._curves.get(address))
                yield tx
                if tx._staged is not None:
                    self._curves[address] = tx._staged
                    if tx._metadata is not None:
                        self._metadata[address] = tx._metadata
            finally:
                held.discard(address)

    def _lock_for(self, address: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(address)
            if lock is None:
                lock = threading.Lock()
                self._locks[address] = lock
            return lock

    def _held_addresses(self) -> set[str]:
        held = getattr(self._held, "addresses", None)
        if held is None:
            held = set()
            self._held.addresses = held
        return held


class ConfigStore:
    """Holder of the GlobalConfig singleton.

    Readers take an immutable snapshot; writers go through update(), which
    checks the caller against the current authority under its own lock,
    independent of any curve lock.
    """

    address = CONFIG_ADDRESS

    def __init__(self, config: GlobalConfig, verifier: AuthorityVerifier | None = None) -> None:
        self._config = config
        self._verifier = verifier
        self._lock = threading.Lock()

    def snapshot(self) -> GlobalConfig:
        return self._config

    def update(
        self,
        caller: str,
        operation: str,
        validate: Callable[[GlobalConfig], None] | None = None,
        **changes: object,
    ) -> GlobalConfig:
        """Replace config fields on behalf of caller.

        Args:
            caller: Identity requesting the change
            operation: Operation name for logs and errors
            validate: Checks the candidate config; runs after the authority check
            **changes: GlobalConfig fields to replace

        Raises:
            Unauthorized: If caller does not control the current authority
        """
        with self._lock:
            current = self._config
            require_authority(caller, current.authority, operation, self._verifier)
            candidate = current.updated(**changes)
            if validate is not None:
                validate(candidate)
            self._config = candidate
            logger.info(
                "config_updated",
                operation=operation,
                fields=sorted(changes),
            )
            return self._config
