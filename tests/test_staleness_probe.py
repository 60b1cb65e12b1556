"""Tests for the range probe and its fixed-delay retry."""

from datetime import timedelta

import pytest

from core.staleness_probe import StalenessProbe
from fakes import FakeMetricTree, FakeStore
from model.metric import MetricStatus, RetryPolicy, StalenessCriteria


def make_probe(tree, store, sleep, attempts=3, wait=timedelta(seconds=5)):
    return StalenessProbe(
        store=store,
        search=tree,
        criteria=StalenessCriteria(max_values_count=200, missing_days=7),
        retry=RetryPolicy(attempts=attempts, wait=wait),
        sleep=sleep,
    )


class TestStalenessProbe:
    @pytest.mark.asyncio
    async def test_missing_bounds_is_noop(self, tree, store, sleep):
        probe = make_probe(tree, store, sleep)

        assert await probe.check(None, None) == 0
        assert await probe.check("a", None) == 0
        assert await probe.check(None, "z") == 0
        assert store.calls == []
        assert tree.set_status_calls == []

    @pytest.mark.asyncio
    async def test_marks_every_returned_path_auto_hidden(self, tree, sleep):
        store = FakeStore(stale=["a.b.leaf1", "a.c.leaf3", "zzz.out.of.range"])
        probe = make_probe(tree, store, sleep)

        hidden = await probe.check("a.b.leaf1", "a.c.leaf3")

        assert hidden == 2
        assert tree.set_status_calls == [
            ("a.b.leaf1", MetricStatus.AUTO_HIDDEN),
            ("a.c.leaf3", MetricStatus.AUTO_HIDDEN),
        ]

    @pytest.mark.asyncio
    async def test_passes_criteria_to_store(self, tree, store, sleep):
        probe = make_probe(tree, store, sleep)
        await probe.check("a", "b")

        (min_key, max_key, criteria), = store.calls
        assert (min_key, max_key) == ("a", "b")
        assert criteria.max_values_count == 200
        assert criteria.missing_days == 7

    @pytest.mark.asyncio
    async def test_recovers_after_transient_failures(self, tree, sleep):
        store = FakeStore(stale=["a.b.leaf2"], failures=2)
        probe = make_probe(tree, store, sleep, attempts=3)

        hidden = await probe.check("a", "b")

        assert hidden == 1
        assert len(store.calls) == 3
        assert sleep.calls == [5.0, 5.0]

    @pytest.mark.asyncio
    async def test_propagates_after_last_attempt(self, tree, sleep):
        store = FakeStore(stale=["a.b.leaf2"], failures=10)
        probe = make_probe(tree, store, sleep, attempts=4, wait=timedelta(milliseconds=250))

        with pytest.raises(ConnectionError):
            await probe.check("a", "b")

        assert len(store.calls) == 4
        # No sleep after the final attempt
        assert sleep.calls == [0.25, 0.25, 0.25]
        assert tree.set_status_calls == []

    @pytest.mark.asyncio
    async def test_single_attempt_never_sleeps(self, tree, sleep):
        store = FakeStore(failures=1)
        probe = make_probe(tree, store, sleep, attempts=1)

        with pytest.raises(ConnectionError):
            await probe.check("a", "b")
        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_failed_attempt_count_is_discarded(self, store, sleep):
        class FlakyTree(FakeMetricTree):
            def __init__(self):
                super().__init__([])
                self.fail_once = True

            async def set_status(self, name, status):
                await super().set_status(name, status)
                if self.fail_once and len(self.set_status_calls) == 1:
                    self.fail_once = False
                    raise ConnectionError("status store hiccup")

        tree = FlakyTree()
        store.stale = {"a.1", "a.2"}
        probe = make_probe(tree, store, sleep)

        hidden = await probe.check("a.1", "a.2")

        # Whole range retried; the first write is re-applied, not double counted
        assert hidden == 2
        assert len(store.calls) == 2
        assert tree.hidden() == {"a.1", "a.2"}
