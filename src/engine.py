import logging
from typing import Iterable, List

from csv_io import read_transactions
from models import AccountView, ProcessingStats, Transaction
from processor import TransactionProcessor
from state import StateManager

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Applies transactions strictly in delivery order, one at a time.
    Records that cannot be applied are dropped; processing never stops on them.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = ProcessingStats()

    def process(self, transaction: Transaction) -> None:
        result = self._processor.process_transaction(transaction)
        self.stats.record(result)

        if result.succeeded:
            logger.debug(f"Applied {transaction}")
        else:
            logger.info(f"Ignored {transaction}: {result.value}")

    def process_records(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self.process(transaction)

    def process_file(self, filepath: str) -> List[AccountView]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")

        # Undecodable bytes become U+FFFD so only the affected row fails to parse
        with open(filepath, "r", newline="", encoding="utf-8-sig", errors="replace") as f:
            self.process_records(read_transactions(f, self.stats))

        logger.info(self.stats.summary())
        return self.snapshot()

    def snapshot(self) -> List[AccountView]:
        """One view per known client, ordered by client id."""
        return [account.view() for account in self._state.sorted_accounts()]

    @property
    def transaction_count(self) -> int:
        return self._state.entry_count()
