from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from amount import Amount
from models import TransactionType


class EntryState(Enum):
    ACTIVE = "active"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class EntryEvent(Enum):
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class TransitionRejected(Exception):
    """Raised when an event is not legal for an entry in its current state."""

    def __init__(self, kind: TransactionType, state: EntryState, event: EntryEvent):
        super().__init__(f"{event.value} not allowed on {kind.value} in state {state.value}")
        self.kind = kind
        self.state = state
        self.event = event


# Withdrawal entries have no transitions: they stay ACTIVE for their whole life.
TRANSITIONS: Dict[Tuple[TransactionType, EntryState, EntryEvent], EntryState] = {
    (TransactionType.DEPOSIT, EntryState.ACTIVE, EntryEvent.DISPUTE): EntryState.DISPUTED,
    (TransactionType.DEPOSIT, EntryState.DISPUTED, EntryEvent.RESOLVE): EntryState.ACTIVE,
    (TransactionType.DEPOSIT, EntryState.DISPUTED, EntryEvent.CHARGEBACK): EntryState.CHARGED_BACK,
}


def next_state(kind: TransactionType, state: EntryState, event: EntryEvent) -> EntryState:
    """Return the state an entry moves to, or raise TransitionRejected."""
    try:
        return TRANSITIONS[(kind, state, event)]
    except KeyError:
        raise TransitionRejected(kind, state, event) from None


def is_disputable(kind: TransactionType) -> bool:
    return any(key[0] == kind and key[2] == EntryEvent.DISPUTE for key in TRANSITIONS)


@dataclass
class LedgerEntry:
    """
    Stored deposit or withdrawal, tracked through its dispute lifecycle.
    Only the processor mutates the state, and only after the matching
    balance change on the account has succeeded.
    """

    transaction_id: int
    client_id: int
    kind: TransactionType
    amount: Amount
    state: EntryState = EntryState.ACTIVE

    def __post_init__(self):
        if self.kind not in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
            raise ValueError(f"Ledger entries hold deposits or withdrawals, not {self.kind.value}")

    def peek(self, event: EntryEvent) -> EntryState:
        """Validate an event without changing the entry."""
        return next_state(self.kind, self.state, event)

    def apply(self, event: EntryEvent) -> EntryState:
        self.state = next_state(self.kind, self.state, event)
        return self.state
