"""Ledger gateway: custody and transfer of sol and tokens.

The launchpad never holds balances itself. It describes value movements as
Transfer records and hands them to a LedgerGateway inside an atomic()
block, so that a failure anywhere in an operation rolls back every
transfer that operation already made.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

from launchpad.errors import InsufficientBalance, InvalidParameters, ZeroAmount
from launchpad.safe_int import S

logger = structlog.get_logger()


class AssetKind(str, Enum):
    """What a transfer moves."""

    SOL = "sol"
    TOKEN = "token"


@dataclass(frozen=True)
class Transfer:
    """A single value movement between two identities."""

    kind: AssetKind
    source: str
    destination: str
    amount: int
    asset_id: str | None = None  # required for TOKEN transfers

    def __post_init__(self) -> None:
        if (self.kind == AssetKind.TOKEN) != (self.asset_id is not None):
            raise InvalidParameters(
                f"{self.kind.value} transfer cannot have asset_id={self.asset_id!r}"
            )

    @classmethod
    def sol(cls, source: str, destination: str, amount: int) -> Transfer:
        return cls(kind=AssetKind.SOL, source=source, destination=destination, amount=amount)

    @classmethod
    def tokens(cls, asset_id: str, source: str, destination: str, amount: int) -> Transfer:
        return cls(
            kind=AssetKind.TOKEN,
            source=source,
            destination=destination,
            amount=amount,
            asset_id=asset_id,
        )


class LedgerGateway(Protocol):
    """External custody collaborator.

    Implementations must make atomic() all-or-nothing: if the block raises,
    every transfer and mint made inside it is undone.
    """

    def transfer_sol(self, source: str, destination: str, amount: int) -> None: ...

    def transfer_tokens(self, asset_id: str, source: str, destination: str, amount: int) -> None: ...

    def mint_tokens(self, asset_id: str, destination: str, amount: int) -> None: ...

    def atomic(self) -> AbstractContextManager[None]: ...


def execute_transfers(ledger: LedgerGateway, transfers: Iterable[Transfer]) -> None:
    """Apply transfers in order, skipping zero amounts."""
    for transfer in transfers:
        if transfer.amount == 0:
            continue
        if transfer.asset_id is None:
            ledger.transfer_sol(transfer.source, transfer.destination, transfer.amount)
        else:
            ledger.transfer_tokens(
                transfer.asset_id, transfer.source, transfer.destination, transfer.amount
            )


class InMemoryLedger:
    """Process-local ledger with snapshot rollback.

    Used by the HTTP service, the simulation script and tests. Balances are
    plain dicts guarded by a re-entrant lock; atomic() snapshots them on
    entry and restores the snapshot if the block raises.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._sol: dict[str, int] = {}
        self._tokens: dict[tuple[str, str], int] = {}
        self._supply: dict[str, int] = {}

    # --- Queries ---

    def sol_balance(self, owner: str) -> int:
        with self._lock:
            return self._sol.get(owner, 0)

    def token_balance(self, asset_id: str, owner: str) -> int:
        with self._lock:
            return self._tokens.get((asset_id, owner), 0)

    def token_supply(self, asset_id: str) -> int:
        with self._lock:
            return self._supply.get(asset_id, 0)

    # --- Mutations ---

    def deposit_sol(self, owner: str, amount: int) -> None:
        """Credit lamports from outside the system (airdrop / on-ramp)."""
        _require_positive(amount)
        with self._lock:
            self._sol[owner] = (S(self._sol.get(owner, 0)) + amount).to_u64()

    def transfer_sol(self, source: str, destination: str, amount: int) -> None:
        _require_positive(amount)
        with self._lock:
            available = self._sol.get(source, 0)
            if available < amount:
                raise InsufficientBalance(
                    f"{source[:12]} holds {available} lamports, needs {amount}"
                )
            self._sol[source] = available - amount
            self._sol[destination] = (S(self._sol.get(destination, 0)) + amount).to_u64()

    def transfer_tokens(self, asset_id: str, source: str, destination: str, amount: int) -> None:
        _require_positive(amount)
        with self._lock:
            available = self._tokens.get((asset_id, source), 0)
            if available < amount:
                raise InsufficientBalance(
                    f"{source[:12]} holds {available} of {asset_id}, needs {amount}"
                )
            self._tokens[(asset_id, source)] = available - amount
            key = (asset_id, destination)
            self._tokens[key] = (S(self._tokens.get(key, 0)) + amount).to_u64()

    def mint_tokens(self, asset_id: str, destination: str, amount: int) -> None:
        _require_positive(amount)
        with self._lock:
            self._supply[asset_id] = (S(self._supply.get(asset_id, 0)) + amount).to_u64()
            key = (asset_id, destination)
            self._tokens[key] = (S(self._tokens.get(key, 0)) + amount).to_u64()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Undo every mutation made in the block if it raises."""
        with self._lock:
            snapshot = (dict(self._sol), dict(self._tokens), dict(self._supply))
            try:
                yield
            except BaseException:
                self._sol, self._tokens, self._supply = snapshot
                logger.debug("ledger_rolled_back")
                raise


def _require_positive(amount: int) -> None:
    if amount <= 0:
        raise ZeroAmount(f"Transfer amount must be positive, got {amount}")
