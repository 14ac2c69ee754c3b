"""Exception types for the take-profit order hook and its collaborators.

Entry points raise these directly; every raise aborts the enclosing
transaction and the journal restores all registered tables (see
``takeprofit.state.journal``).
"""

from __future__ import annotations


class TakeProfitError(Exception):
    """Base class for all errors raised by this package."""


# -- order ledger -------------------------------------------------------------


class InvalidAmount(TakeProfitError, ValueError):
    """Raised when an amount that must be positive is zero or negative."""


class NoActiveOrder(TakeProfitError):
    """Raised when cancelling with a zero receipt balance."""


class OrderPartiallyFilled(TakeProfitError):
    """Raised when cancelling an order that already has filled output."""


class UnknownOrder(TakeProfitError):
    """Raised when an order id has never been placed."""


class NothingClaimable(TakeProfitError):
    """Raised when redeeming against an order with no filled output."""


class InsufficientReceipt(TakeProfitError):
    """Raised when burning or moving more receipt tokens than are held."""


class PoolNotInitialized(TakeProfitError):
    """Raised when the hook has never observed the pool's initialization."""


class UnboundedSweepCost(TakeProfitError):
    """Raised when one swap crosses more buckets than the configured bound."""

    def __init__(self, crossed: int, limit: int) -> None:
        self.crossed = crossed
        self.limit = limit
        super().__init__(f"sweep crosses {crossed} buckets, limit is {limit}")


class SettlementFailure(TakeProfitError):
    """Raised when either asset leg of a fill fails to settle."""


class ReentrancyRejected(TakeProfitError):
    """Raised when a mutating entry point is entered while another is active."""


class LedgerInvariantError(TakeProfitError):
    """Raised when a post-state violates one or more ledger invariants."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


# -- asset transfers ----------------------------------------------------------


class InsufficientBalance(TakeProfitError, ValueError):
    """Raised when a transfer would drive a balance negative."""


class InsufficientAllowance(TakeProfitError, ValueError):
    """Raised when a spender moves more than it was approved for."""


# -- pool controller ----------------------------------------------------------


class PoolError(TakeProfitError):
    """Base class for pool controller failures."""


class ManagerLocked(PoolError):
    """Raised when a delta-accruing call is made outside ``unlock``."""


class CurrencyNotSettled(PoolError):
    """Raised when an unlock context closes with non-zero deltas."""


class PriceLimitExceeded(PoolError):
    """Raised when a swap would move the price past its limit."""


class PoolAlreadyInitialized(PoolError):
    """Raised when initializing a pool id twice."""


class UnknownPool(PoolError):
    """Raised when a pool id has not been initialized."""
