from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from amount import Amount


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def moves_funds(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    UNKNOWN_ACCOUNT = "unknown_account"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    OVERFLOW = "overflow"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    CLIENT_MISMATCH = "client_mismatch"
    NOT_DISPUTABLE = "not_disputable"
    INVALID_TRANSITION = "invalid_transition"

    @property
    def succeeded(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class AccountView:
    """Read-only snapshot row for one client."""

    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool


@dataclass
class ClientAccount:
    """
    Available/held balances of one client.
    Every mutation is checked and computes all new values before assigning,
    so a failed operation leaves the account exactly as it was.
    """

    client_id: int
    available: Amount = field(default_factory=Amount.zero)
    held: Amount = field(default_factory=Amount.zero)
    locked: bool = False

    @property
    def total(self) -> Amount:
        return self.available.checked_add(self.held)

    def credit(self, amount: Amount) -> None:
        # total bounds available, so checking total covers both
        self.total.checked_add(amount)
        self.available = self.available.checked_add(amount)

    def debit(self, amount: Amount) -> None:
        self.available = self.available.checked_sub(amount)

    def hold(self, amount: Amount) -> None:
        available = self.available.checked_sub(amount)
        held = self.held.checked_add(amount)
        self.available, self.held = available, held

    def release_hold(self, amount: Amount) -> None:
        held = self.held.checked_sub(amount)
        available = self.available.checked_add(amount)
        self.available, self.held = available, held

    def remove_held(self, amount: Amount) -> None:
        self.held = self.held.checked_sub(amount)

    def lock(self) -> None:
        self.locked = True

    def view(self) -> AccountView:
        return AccountView(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.dropped_rows = 0
        self.failures: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        if result.succeeded:
            self.processed += 1
        else:
            self.failed += 1
            self.failures[result] += 1

    def record_dropped_row(self) -> None:
        self.dropped_rows += 1

    def summary(self) -> str:
        return f"Processed: {self.processed}, Failed: {self.failed}, Dropped rows: {self.dropped_rows}"
