"""Tests for dual_db_sync.sync.read_router module.

Validates alternation, toggle-on-failure, first-column results and
thread safety of the routing state.
"""

import threading

import pytest

from dual_db_sync.errors import ReadError
from dual_db_sync.sync.read_router import (
    ReadResult,
    ReadRouter,
    RoutingTarget,
    execute_read,
)


class TestRouteRead:
    """Test target selection."""

    def test_starts_with_primary(self, fake_pair):
        primary, replica = fake_pair
        router = ReadRouter()
        target, conn = router.route_read(primary, replica)
        assert target == RoutingTarget.PRIMARY
        assert conn is primary

    def test_alternates(self, fake_pair):
        primary, replica = fake_pair
        router = ReadRouter()
        targets = [router.route_read(primary, replica)[0] for _ in range(5)]
        assert targets == [
            RoutingTarget.PRIMARY,
            RoutingTarget.REPLICA,
            RoutingTarget.PRIMARY,
            RoutingTarget.REPLICA,
            RoutingTarget.PRIMARY,
        ]

    def test_next_target_does_not_advance(self):
        router = ReadRouter()
        assert router.next_target == RoutingTarget.PRIMARY
        assert router.next_target == RoutingTarget.PRIMARY

    def test_reset(self, fake_pair):
        primary, replica = fake_pair
        router = ReadRouter()
        router.route_read(primary, replica)
        assert router.next_target == RoutingTarget.REPLICA
        router.reset()
        assert router.next_target == RoutingTarget.PRIMARY

    def test_replica_first(self, fake_pair):
        primary, replica = fake_pair
        router = ReadRouter(initial_target=RoutingTarget.REPLICA)
        assert router.route_read(primary, replica)[1] is replica

    def test_routers_are_independent(self, fake_pair):
        """Each router owns its own state."""
        primary, replica = fake_pair
        a = ReadRouter()
        b = ReadRouter()
        a.route_read(primary, replica)
        assert b.next_target == RoutingTarget.PRIMARY


class TestExecuteRead:
    """Test first-column extraction."""

    def test_first_column_as_text(self, fake_pair):
        primary, _ = fake_pair
        primary.rows = [(1, "x"), (2, "y")]
        assert execute_read(primary, "SELECT a, b FROM t") == ["1", "2"]

    def test_null_stays_none(self, fake_pair):
        primary, _ = fake_pair
        primary.rows = [(None,), ("a",)]
        assert execute_read(primary, "SELECT a FROM t") == [None, "a"]

    def test_empty_result(self, fake_pair):
        primary, _ = fake_pair
        primary.rows = []
        assert execute_read(primary, "SELECT a FROM t") == []

    def test_driver_error_wrapped(self, fake_pair):
        primary, _ = fake_pair
        primary.fail_query = True
        with pytest.raises(ReadError) as exc_info:
            execute_read(primary, "SELECT 1")
        assert exc_info.value.target == "primary"
        assert isinstance(exc_info.value.cause, RuntimeError)


class TestRead:
    """Test routed reads end to end on fake connections."""

    def test_read_success(self, fake_pair, call_log):
        primary, replica = fake_pair
        router = ReadRouter()

        first = router.read(primary, replica, "SELECT a FROM t")
        second = router.read(primary, replica, "SELECT a FROM t")

        assert first.success and second.success
        assert first.target == RoutingTarget.PRIMARY
        assert first.values == ["p"]
        assert second.target == RoutingTarget.REPLICA
        assert second.values == ["r"]
        assert [entry[0] for entry in call_log] == ["primary", "replica"]

    def test_failed_read_still_advances(self, fake_pair, call_log):
        """A failed read is not retried on the same target next time."""
        primary, replica = fake_pair
        primary.fail_query = True
        router = ReadRouter()

        failed = router.read(primary, replica, "SELECT 1")
        assert failed.success is False
        assert failed.target == RoutingTarget.PRIMARY
        assert isinstance(failed.error, ReadError)
        assert failed.values == []

        ok = router.read(primary, replica, "SELECT 1")
        assert ok.success is True
        assert ok.target == RoutingTarget.REPLICA

        third = router.read(primary, replica, "SELECT 1")
        assert third.target == RoutingTarget.PRIMARY

    def test_failed_read_does_not_raise(self, fake_pair):
        primary, replica = fake_pair
        primary.fail_query = True
        replica.fail_query = True
        router = ReadRouter()
        for _ in range(4):
            assert router.read(primary, replica, "SELECT 1").success is False

    def test_failed_read_logged_as_warning(self, fake_pair, caplog):
        primary, replica = fake_pair
        primary.fail_query = True
        router = ReadRouter()

        with caplog.at_level("DEBUG", logger="dual_db_sync"):
            router.read(primary, replica, "SELECT 1")

        records = [r for r in caplog.records if r.name == "dual_db_sync.sync.read_router"]
        assert [r.levelname for r in records] == ["WARNING"]
        assert records[0].target == "primary"

    def test_result_to_dict(self):
        r = ReadResult(success=True, target=RoutingTarget.REPLICA, values=["1"])
        assert r.to_dict() == {
            "success": True,
            "target": "replica",
            "values": ["1"],
            "error": None,
        }


class TestConcurrency:
    """Test that concurrent reads split evenly between targets."""

    def test_concurrent_reads_alternate(self, fake_pair, call_log):
        primary, replica = fake_pair
        router = ReadRouter()
        errors = []

        def read_task():
            try:
                for _ in range(50):
                    router.read(primary, replica, "SELECT 1")
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=read_task) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        names = [entry[0] for entry in call_log]
        assert len(names) == 400
        assert names.count("primary") == 200
        assert names.count("replica") == 200
        assert router.next_target == RoutingTarget.PRIMARY
