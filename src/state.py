from typing import Dict, List, Optional

from ledger import LedgerEntry
from models import ClientAccount


class StateManager:
    """
    In-memory state: client accounts and the ledger entries needed for dispute lookups.
    Accounts are only registered once a transaction for the client has succeeded.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._entries: Dict[int, LedgerEntry] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def add_account(self, account: ClientAccount) -> None:
        self._accounts.setdefault(account.client_id, account)

    def has_entry(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def store_entry(self, entry: LedgerEntry) -> None:
        """Store a successfully applied deposit or withdrawal."""
        if entry.transaction_id in self._entries:
            raise KeyError(f"Transaction {entry.transaction_id} already stored")
        self._entries[entry.transaction_id] = entry

    def get_entry(self, transaction_id: int) -> Optional[LedgerEntry]:
        return self._entries.get(transaction_id)

    def entry_count(self) -> int:
        return len(self._entries)

    def sorted_accounts(self) -> List[ClientAccount]:
        """Return all accounts ordered by client id (for final output)."""
        return [self._accounts[client_id] for client_id in sorted(self._accounts)]
