import logging
from typing import Callable, Optional

from amount import Amount, AmountOverflowError, AmountUnderflowError
from ledger import EntryEvent, LedgerEntry, TransitionRejected, is_disputable
from models import Transaction, TransactionType, ClientAccount, ProcessingResult
from state import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to state.
    Returns ProcessingResult to indicate success or why the record was ignored.
    A record that is not applied leaves accounts and ledger entries untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        rejected = self._check_fund_movement(transaction)
        if rejected is not None:
            return rejected

        account = self._state.get_account(transaction.client_id)
        is_new_account = account is None
        if is_new_account:
            account = ClientAccount(client_id=transaction.client_id)

        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        try:
            account.credit(transaction.amount)
        except AmountOverflowError:
            logger.debug(f"Deposit tx {transaction.transaction_id}: balance would exceed the maximum")
            return ProcessingResult.OVERFLOW

        if is_new_account:
            self._state.add_account(account)
        self._store(transaction)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        rejected = self._check_fund_movement(transaction)
        if rejected is not None:
            return rejected

        account = self._state.get_account(transaction.client_id)
        if account is None:
            return ProcessingResult.UNKNOWN_ACCOUNT

        if account.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        if account.available < transaction.amount:
            logger.debug(f"Withdrawal tx {transaction.transaction_id}: insufficient funds ({account.available} < {transaction.amount})")
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        self._store(transaction)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        return self._apply_event(transaction, EntryEvent.DISPUTE, ClientAccount.hold)

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        return self._apply_event(transaction, EntryEvent.RESOLVE, ClientAccount.release_hold)

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        def charge_back(account: ClientAccount, amount: Amount) -> None:
            account.remove_held(amount)
            account.lock()

        return self._apply_event(transaction, EntryEvent.CHARGEBACK, charge_back)

    def _apply_event(
        self,
        transaction: Transaction,
        event: EntryEvent,
        move_funds: Callable[[ClientAccount, Amount], None],
    ) -> ProcessingResult:
        """
        Shared path for dispute, resolve and chargeback.
        The entry transition is validated first, the balance change applied
        second, and the entry state committed only after both succeeded.
        """
        entry = self._state.get_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"{event.value} for tx {transaction.transaction_id}: transaction not found")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        if entry.client_id != transaction.client_id:
            logger.warning(f"{event.value} for tx {transaction.transaction_id}: client mismatch (expected {entry.client_id}, got {transaction.client_id})")
            return ProcessingResult.CLIENT_MISMATCH

        try:
            entry.peek(event)
        except TransitionRejected as e:
            logger.debug(f"{event.value} for tx {transaction.transaction_id}: {e}")
            if not is_disputable(entry.kind):
                return ProcessingResult.NOT_DISPUTABLE
            return ProcessingResult.INVALID_TRANSITION

        account = self._state.get_account(entry.client_id)
        try:
            move_funds(account, entry.amount)
        except AmountUnderflowError:
            logger.debug(f"{event.value} for tx {transaction.transaction_id}: {entry.amount} exceeds the balance it moves from")
            return ProcessingResult.INSUFFICIENT_FUNDS
        except AmountOverflowError:
            return ProcessingResult.OVERFLOW

        entry.apply(event)
        return ProcessingResult.SUCCESS

    def _check_fund_movement(self, transaction: Transaction) -> Optional[ProcessingResult]:
        if transaction.amount is None or transaction.amount.is_zero():
            logger.debug(f"{transaction.transaction_type.value} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if self._state.has_entry(transaction.transaction_id):
            logger.debug(f"{transaction.transaction_type.value} tx {transaction.transaction_id}: already processed, ignoring duplicate")
            return ProcessingResult.DUPLICATE_TRANSACTION

        return None

    def _store(self, transaction: Transaction) -> None:
        self._state.store_entry(
            LedgerEntry(
                transaction_id=transaction.transaction_id,
                client_id=transaction.client_id,
                kind=transaction.transaction_type,
                amount=transaction.amount,
            )
        )
