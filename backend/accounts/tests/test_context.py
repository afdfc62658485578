import asyncio
import time

import pytest
from structlog.testing import capture_logs

from accounts.context import RequestContext


class TestRequestContext:
    def test_default_has_trace_id_and_no_deadline(self):
        ctx = RequestContext()
        assert ctx.trace_id
        assert ctx.deadline is None
        assert ctx.remaining() is None
        assert not ctx.expired()

    def test_trace_ids_are_unique(self):
        assert RequestContext().trace_id != RequestContext().trace_id

    def test_with_timeout_sets_deadline(self):
        ctx = RequestContext.with_timeout(10.0, trace_id="abc")
        assert ctx.trace_id == "abc"
        assert 9.0 < ctx.remaining() <= 10.0

    def test_with_timeout_none_is_unbounded(self):
        assert RequestContext.with_timeout(None).deadline is None

    def test_expired_deadline(self):
        ctx = RequestContext(deadline=time.monotonic() - 1)
        assert ctx.expired()
        assert ctx.remaining() == 0.0

    def test_log_binds_trace_id(self):
        ctx = RequestContext(trace_id="trace-123")
        with capture_logs() as logs:
            ctx.log.info("hello")
        assert logs == [{"event": "hello", "log_level": "info", "trace_id": "trace-123"}]


class TestBounded:
    async def test_unbounded_scope_does_not_time_out(self):
        async with RequestContext().bounded():
            await asyncio.sleep(0)

    async def test_deadline_raises_timeout(self):
        ctx = RequestContext.with_timeout(0.01)
        with pytest.raises(TimeoutError):
            async with ctx.bounded():
                await asyncio.sleep(1)

    async def test_limit_shorter_than_deadline_wins(self):
        ctx = RequestContext.with_timeout(10.0)
        start = time.monotonic()
        with pytest.raises(TimeoutError):
            async with ctx.bounded(0.01):
                await asyncio.sleep(1)
        assert time.monotonic() - start < 1.0

    async def test_limit_applies_without_deadline(self):
        with pytest.raises(TimeoutError):
            async with RequestContext().bounded(0.01):
                await asyncio.sleep(1)
