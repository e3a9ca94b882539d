import csv
import logging
from typing import Dict, Iterable, Iterator, Optional, TextIO

from amount import Amount, AmountError
from models import AccountView, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

OUTPUT_HEADER = "client,available,held,total,locked"


def _parse_id(value: str, maximum: int, name: str) -> int:
    # int() alone would accept signs, underscores and non-ASCII digits
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{name} {value!r} is not an unsigned integer")
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise ValueError(f"{name} {parsed} out of range [0, {maximum}]")
    return parsed


def parse_row(row: Dict[Optional[str], str]) -> Optional[Transaction]:
    """Parse a CSV row into a Transaction, or None if the row is malformed."""
    try:
        # csv.DictReader stores surplus columns under the None key
        normalized = {
            key.strip().lower(): value.strip()
            for key, value in row.items()
            if key is not None and value is not None
        }

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_id(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        if transaction_type.moves_funds:
            amount = Amount.parse(normalized["amount"])

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
    except (KeyError, ValueError, AmountError) as e:
        logger.warning(f"Failed to parse row {row}: {e}")
        return None


def read_transactions(stream: TextIO, stats: Optional[ProcessingStats] = None) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV stream in file order.
    Malformed rows are dropped (and counted in stats when given).
    """
    reader = csv.DictReader(stream)
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            logger.warning(f"Failed to read line {reader.line_num}: {e}")
            if stats is not None:
                stats.record_dropped_row()
            continue

        transaction = parse_row(row)
        if transaction is None:
            if stats is not None:
                stats.record_dropped_row()
            continue
        yield transaction


def format_row(view: AccountView) -> str:
    return (
        f"{view.client_id},"
        f"{view.available.format()},"
        f"{view.held.format()},"
        f"{view.total.format()},"
        f"{str(view.locked).lower()}"
    )


def write_accounts(views: Iterable[AccountView], stream: TextIO) -> None:
    print(OUTPUT_HEADER, file=stream)
    for view in views:
        print(format_row(view), file=stream)
