"""Base classes for bonding curve pricing."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CurveSwap:
    """Result of pricing a trade against virtual reserves.

    amount_in / amount_out are pre-fee amounts; the new_* fields are the
    virtual reserves after the trade is applied.
    """

    amount_in: int
    amount_out: int
    new_virtual_sol_reserves: int
    new_virtual_token_reserves: int

    @property
    def new_invariant(self) -> int:
        return self.new_virtual_sol_reserves * self.new_virtual_token_reserves


class PricingCurve(ABC):
    """Abstract pricing function over a (sol, token) virtual reserve pair.

    All quotes round in the pool's favor: amounts the trader pays are
    rounded up, amounts the trader receives are rounded down.
    """

    @abstractmethod
    def buy_exact_out(self, tokens_out: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Price a buy of exactly tokens_out (sol cost rounded up)."""
        ...

    @abstractmethod
    def buy_exact_in(self, sol_in: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Price a buy spending exactly sol_in (tokens out rounded down)."""
        ...

    @abstractmethod
    def sell_exact_in(self, tokens_in: int, sol_reserves: int, token_reserves: int) -> CurveSwap:
        """Price a sell of exactly tokens_in (sol out rounded down)."""
        ...
