"""Validate correlation id binding and log event enrichment."""

import asyncio

import structlog

from nftgate.core.logging import (
    CORRELATION_ID_KEY,
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)


class TestCorrelationId:
    """Test correlation ids bound through structlog context variables."""

    def teardown_method(self):
        clear_correlation_id()

    def test_explicit_id(self):
        """Test an explicit correlation id is bound and returned."""
        assert set_correlation_id("req-42") == "req-42"
        assert get_correlation_id() == "req-42"

    def test_generated_id(self):
        """Test a short id is generated when none is given."""
        generated = set_correlation_id()

        assert len(generated) == 8
        assert get_correlation_id() == generated

    def test_clear(self):
        """Test clearing removes the bound id."""
        set_correlation_id("req-1")
        clear_correlation_id()

        assert get_correlation_id() is None

    def test_merged_into_log_events(self):
        """Test the contextvars processor adds the id to each event."""
        set_correlation_id("abc")

        event = structlog.contextvars.merge_contextvars(None, "info", {"event": "x"})

        assert event == {"event": "x", CORRELATION_ID_KEY: "abc"}

    def test_concurrent_tasks_keep_separate_ids(self):
        """Test two concurrent tasks each see only their own id."""

        async def handle(request_id):
            set_correlation_id(request_id)
            await asyncio.sleep(0.01)
            return get_correlation_id()

        async def run_both():
            return await asyncio.gather(handle("req-a"), handle("req-b"))

        assert asyncio.run(run_both()) == ["req-a", "req-b"]
        assert get_correlation_id() is None

    def test_task_inherits_id_bound_before_it_starts(self):
        """Test a task created after binding sees the caller's id."""
        set_correlation_id("outer")

        async def read():
            return get_correlation_id()

        assert asyncio.run(read()) == "outer"
