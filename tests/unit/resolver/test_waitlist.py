"""Unit tests for Waitlist and render cycles."""

import asyncio
import threading

import pytest

from helper_cache.resolver import (
    PendingInvocation,
    Waitlist,
    get_current_waitlist,
    render_cycle,
)


def make_invocation(token: str, name: str = "h") -> PendingInvocation:
    return PendingInvocation(token=token, name=name, args=(), fn=lambda cb: cb(None, name))


class TestWaitlist:
    def test_fifo_drain(self):
        waitlist = Waitlist()
        for token in ("t1", "t2", "t3"):
            waitlist.append(make_invocation(token))
        assert [inv.token for inv in waitlist.drain()] == ["t1", "t2", "t3"]
        assert len(waitlist) == 0

    def test_drain_sees_late_appends(self):
        waitlist = Waitlist()
        waitlist.append(make_invocation("t1"))
        seen = []
        for inv in waitlist.drain():
            seen.append(inv.token)
            if inv.token == "t1":
                waitlist.append(make_invocation("t2"))
        assert seen == ["t1", "t2"]

    def test_clear_returns_count(self):
        waitlist = Waitlist()
        waitlist.append(make_invocation("t1"))
        waitlist.append(make_invocation("t2"))
        assert waitlist.clear() == 2
        assert waitlist.tokens() == []

    def test_empty_waitlist_is_falsy(self):
        assert not Waitlist()

    def test_cycle_ids_differ(self):
        assert Waitlist().cycle_id != Waitlist().cycle_id


class TestRenderCycle:
    def test_no_cycle_outside(self):
        assert get_current_waitlist() is None

    def test_cycle_installs_and_restores(self):
        with render_cycle() as outer:
            assert get_current_waitlist() is outer
            with render_cycle() as inner:
                assert get_current_waitlist() is inner
                assert inner is not outer
            assert get_current_waitlist() is outer
        assert get_current_waitlist() is None

    def test_explicit_waitlist(self):
        waitlist = Waitlist()
        with render_cycle(waitlist) as current:
            assert current is waitlist

    def test_restored_after_error(self):
        with pytest.raises(RuntimeError):
            with render_cycle():
                raise RuntimeError("boom")
        assert get_current_waitlist() is None

    def test_threads_are_isolated(self):
        seen = []

        def worker():
            seen.append(get_current_waitlist())

        with render_cycle():
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_tasks_are_isolated(self):
        async def render(name: str) -> tuple[str, bool]:
            with render_cycle() as waitlist:
                await asyncio.sleep(0)
                return name, get_current_waitlist() is waitlist

        results = await asyncio.gather(render("a"), render("b"))
        assert results == [("a", True), ("b", True)]
