import sys
import logging

from config import get_settings
from csv_io import write_accounts
from engine import PaymentsEngine

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )

    if len(argv) != 1:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read input {filepath}: {e}")
        return 1

    write_accounts(accounts, sys.stdout)

    if settings.report_stats:
        print(engine.stats.summary(), file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
