import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount
from engine import PaymentsEngine


def generate_lifecycle_rows(num_clients: int, rounds: int) -> list:
    """
    Per client: `rounds` times deposit/dispute/resolve/withdrawal of the same
    amount, then a deposit that is disputed and charged back, then a deposit
    that is rejected because the account is locked.
    Every account ends at zero and locked, with 2 * rounds + 1 stored transactions.
    """
    rows = ["type, client, tx, amount"]
    tx_id = 0
    for client_id in range(1, num_clients + 1):
        for amount in range(client_id, client_id + rounds):
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, {amount}")
            rows.append(f"dispute, {client_id}, {tx_id}")
            rows.append(f"resolve, {client_id}, {tx_id}")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, {amount}")

        amount = client_id + rounds
        tx_id += 1
        rows.append(f"deposit, {client_id}, {tx_id}, {amount}")
        rows.append(f"dispute, {client_id}, {tx_id}")
        rows.append(f"chargeback, {client_id}, {tx_id}, 0")
        tx_id += 1
        rows.append(f"deposit, {client_id}, {tx_id}, {amount}")
    return rows


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        """Test with 1000 accounts and 6000 transactions."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Each client gets: 3 deposits (100, 200, 300) and 2 withdrawals (50, 100)
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 100")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 200")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 300")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 50")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 100")
            tx_id += 1

        # Extra deposit for each client
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        expected_balance = Amount.parse("500")  # 450 + 50

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = {view.client_id: view for view in engine.process_file(str(csv_file))}

        assert len(accounts) == num_clients
        assert engine.transaction_count == 6 * num_clients

        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].available == expected_balance, \
                f"Client {client_id}: expected {expected_balance}, got {accounts[client_id].available}"
            assert accounts[client_id].held == Amount.zero()
            assert accounts[client_id].locked is False

    def test_with_disputes_resolves_chargebacks(self, tmp_path):
        """Test with disputes, resolves, and chargebacks across 50 accounts."""
        rows = ["type, client, tx, amount"]

        # Client 1-10: Normal deposits only
        for client_id in range(1, 11):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")

        # Client 11-20: Deposit -> Dispute -> Resolve
        for client_id in range(11, 21):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")
        for client_id in range(11, 21):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(11, 21):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 1},")

        # Client 21-30: Deposit -> Dispute -> Chargeback
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")
        for client_id in range(21, 31):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(21, 31):
            rows.append(f"chargeback, {client_id}, {client_id * 100 + 1},")

        # Client 31-40: Deposit -> Withdrawal -> Dispute (on deposit)
        for client_id in range(31, 41):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 250")
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 3}, 100")
        for client_id in range(31, 41):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")

        # Client 41-50: Multiple deposits, dispute middle one, resolve
        for client_id in range(41, 51):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 200")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 300")
        for client_id in range(41, 51):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 2},")
        for client_id in range(41, 51):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 2},")

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = {view.client_id: view for view in engine.process_file(str(csv_file))}

        for client_id in range(1, 21):
            assert accounts[client_id].available == Amount.parse("500"), f"Client {client_id}"
            assert accounts[client_id].held == Amount.zero()
            assert accounts[client_id].locked is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Amount.parse("400"), f"Client {client_id}"
            assert accounts[client_id].held == Amount.zero()
            assert accounts[client_id].total == Amount.parse("400")
            assert accounts[client_id].locked is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Amount.parse("150"), f"Client {client_id}"
            assert accounts[client_id].held == Amount.parse("150")
            assert accounts[client_id].total == Amount.parse("300")
            assert accounts[client_id].locked is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Amount.parse("600"), f"Client {client_id}"
            assert accounts[client_id].held == Amount.zero()
            assert accounts[client_id].locked is False

    def test_full_lifecycle_corpus(self, tmp_path):
        num_clients, rounds = 200, 20
        csv_file = tmp_path / "lifecycle.csv"
        csv_file.write_text('\n'.join(generate_lifecycle_rows(num_clients, rounds)))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.transaction_count == (2 * rounds + 1) * num_clients
        assert engine.stats.dropped_rows == 0
        for view in accounts:
            assert (view.total, view.locked) == (Amount.zero(), True), f"Client {view.client_id}"
