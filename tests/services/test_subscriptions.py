import threading

import pytest

from services.subscriptions import Subscription
from tests.helpers import make_transaction, wait_for


class TestTransactionSubscriptions:
    """Tests for live snapshot subscriptions on TransactionService."""

    def test_initial_snapshot(self, services):
        existing = services.transactions.create("alice", 10, "Existing")

        with services.transactions.subscribe("alice") as subscription:
            assert next(subscription) == [existing]

    def test_initial_snapshot_when_empty(self, services):
        with services.transactions.subscribe("alice") as subscription:
            assert next(subscription) == []

    def test_snapshot_after_create_and_delete(self, services):
        with services.transactions.subscribe("alice") as subscription:
            assert next(subscription) == []

            created = services.transactions.create("alice", 10, "Lunch", category="food")
            assert next(subscription) == [created]

            services.transactions.delete(created.id, "alice")
            assert next(subscription) == []

    def test_snapshot_after_bulk_create(self, services):
        transactions = [make_transaction(description=f"T{i}") for i in range(2)]

        with services.transactions.subscribe("alice") as subscription:
            next(subscription)
            services.transactions.bulk_create(transactions)

            snapshot = next(subscription)
            assert {t.id for t in snapshot} == {t.id for t in transactions}

    def test_other_owners_changes_not_delivered(self, services):
        with services.transactions.subscribe("alice") as subscription:
            next(subscription)
            services.transactions.create("bob", 10, "Bob's thing")

            assert subscription.get(timeout=0.01) is None

    def test_publish_without_changes_delivers_nothing(self, services):
        with services.transactions.subscribe("alice") as subscription:
            next(subscription)

            assert services.transactions.publish("alice") == 0
            assert subscription.get(timeout=0.01) is None

    def test_publish_picks_up_external_changes(self, services, test_db):
        """Test writes made outside the service reach subscribers on publish."""
        with services.transactions.subscribe("alice") as subscription:
            next(subscription)

            test_db.execute(
                """
                INSERT INTO transactions
                    (id, owner_id, amount, description, category, transaction_type, date)
                VALUES ('ext', 'alice', 9.5, 'From elsewhere', 'food', 'expense',
                        '2025-01-15T10:00:00+00:00')
                """
            )
            test_db.commit()

            assert services.transactions.publish("alice") == 1
            assert [t.id for t in next(subscription)] == ["ext"]

    def test_cancel_stops_iteration(self, services):
        subscription = services.transactions.subscribe("alice")
        next(subscription)

        subscription.cancel()

        assert subscription.cancelled
        with pytest.raises(StopIteration):
            next(subscription)
        assert services.transactions.subscription_count("alice") == 0

    def test_cancel_drops_queued_snapshots(self, services):
        subscription = services.transactions.subscribe("alice")

        subscription.cancel()

        assert list(subscription) == []

    def test_context_manager_detaches(self, services):
        with services.transactions.subscribe("alice"):
            assert services.transactions.subscription_count("alice") == 1

        assert services.transactions.subscription_count() == 0

    def test_multiple_subscriptions_each_receive(self, services):
        first = services.transactions.subscribe("alice")
        second = services.transactions.subscribe("alice")
        next(first)
        next(second)

        created = services.transactions.create("alice", 3, "Gum")

        assert next(first) == [created]
        assert next(second) == [created]

        first.cancel()
        second.cancel()

    def test_snapshot_load_failure_is_logged(self, services, monkeypatch, caplog):
        """Test a failing snapshot load does not break the triggering write."""
        subscription = services.transactions.subscribe("alice")
        next(subscription)

        def broken(owner_id):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(services.transactions, "find_by_owner", broken)

        created = services.transactions.create("alice", 3, "Gum")

        assert created.id
        assert "store unavailable" in caplog.text
        assert subscription.get(timeout=0.01) is None
        subscription.cancel()

    def test_overlapping_publishes_end_on_latest_snapshot(
        self, file_services, monkeypatch
    ):
        """Test a slow publish cannot deliver its older snapshot last."""
        store = file_services.transactions
        find_by_owner = store.find_by_owner
        loaded = threading.Event()
        release = threading.Event()

        def slow_find_by_owner(owner_id):
            snapshot = find_by_owner(owner_id)
            if threading.current_thread().name == "slow-publisher":
                loaded.set()
                release.wait(timeout=5)
            return snapshot

        monkeypatch.setattr(store, "find_by_owner", slow_find_by_owner)
        created = []

        with store.subscribe("alice") as subscription:
            assert subscription.get(timeout=1) == []

            slow = threading.Thread(
                target=store.publish, args=("alice",), name="slow-publisher"
            )
            slow.start()
            assert loaded.wait(timeout=5)

            writer = threading.Thread(
                target=lambda: created.append(store.create("alice", 5, "New"))
            )
            writer.start()
            assert wait_for(lambda: len(find_by_owner("alice")) == 1)

            release.set()
            slow.join(timeout=5)
            writer.join(timeout=5)
            assert not slow.is_alive()
            assert not writer.is_alive()

            snapshots = []
            snapshot = subscription.get(timeout=0.2)
            while snapshot is not None:
                snapshots.append(snapshot)
                snapshot = subscription.get(timeout=0.2)

        assert snapshots
        assert snapshots[-1] == created

    def test_cancel_subscriptions(self, services):
        alice = services.transactions.subscribe("alice")
        bob = services.transactions.subscribe("bob")

        assert services.transactions.cancel_subscriptions("alice") == 1
        assert alice.cancelled
        assert not bob.cancelled

        assert services.transactions.cancel_subscriptions() == 1
        assert bob.cancelled
        assert services.transactions.subscription_count() == 0


class TestSubscription:
    """Tests for the Subscription feed itself."""

    def test_duplicate_snapshots_are_dropped(self):
        subscription = Subscription("alice")
        snapshot = [make_transaction()]

        assert subscription.deliver(snapshot) is True
        assert subscription.deliver(list(snapshot)) is False
        assert subscription.get(timeout=0.01) == snapshot
        assert subscription.get(timeout=0.01) is None

    def test_deliver_after_cancel_is_ignored(self):
        subscription = Subscription("alice")
        subscription.cancel()

        assert subscription.deliver([]) is False

    def test_cancel_twice_calls_back_once(self):
        calls = []
        subscription = Subscription("alice", on_cancel=calls.append)

        subscription.cancel()
        subscription.cancel()

        assert calls == [subscription]

    def test_cancel_wakes_blocked_consumer(self):
        subscription = Subscription("alice")
        received = []

        def consume():
            for snapshot in subscription:
                received.append(snapshot)

        consumer = threading.Thread(target=consume)
        consumer.start()

        subscription.deliver([])
        subscription.cancel()
        consumer.join(timeout=2)

        assert not consumer.is_alive()
        assert received in ([], [[]])
