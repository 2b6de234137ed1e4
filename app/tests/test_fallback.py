import logging

import pytest

from app.core.exceptions import PipelineError, ProviderError
from app.services.pipeline.fallback import best_effort, first_success

from conftest import FakeAdapter


@pytest.mark.asyncio
async def test_first_success_stops_at_primary():
    primary = FakeAdapter("primary", "primary-result")
    secondary = FakeAdapter("secondary", "secondary-result")

    result = await first_success([primary, secondary], "req", stage="test", failure_message="all failed")

    assert result == "primary-result"
    assert secondary.calls == []


@pytest.mark.asyncio
async def test_first_success_falls_through_in_order():
    first = FakeAdapter("first", error=RuntimeError("boom"))
    second = FakeAdapter("second", error=ConnectionError("refused"))
    third = FakeAdapter("third", "third-result")

    result = await first_success([first, second, third], "req", stage="test", failure_message="all failed")

    assert result == "third-result"
    assert [len(a.calls) for a in (first, second, third)] == [1, 1, 1]


@pytest.mark.asyncio
async def test_first_success_aggregates_errors():
    first = FakeAdapter("first", error=RuntimeError("boom"))
    second = FakeAdapter("second", error=ValueError("bad json"))

    with pytest.raises(PipelineError) as exc_info:
        await first_success([first, second], "req", stage="analysis", failure_message="all failed")

    error = exc_info.value
    assert error.message == "all failed"
    assert error.stage == "analysis"
    assert [c.provider for c in error.causes] == ["first", "second"]
    assert error.details["providers"] == ["first failed: boom", "second failed: bad json"]


@pytest.mark.asyncio
async def test_first_success_with_no_providers_fails():
    with pytest.raises(PipelineError, match="nothing configured"):
        await first_success([], "req", stage="test", failure_message="nothing configured")


@pytest.mark.asyncio
async def test_timeout_is_a_provider_error_eligible_for_fallback():
    slow = FakeAdapter("slow", "too-late", delay=1.0, timeout=0.05)
    fast = FakeAdapter("fast", "fast-result")

    result = await first_success([slow, fast], "req", stage="test", failure_message="all failed")

    assert result == "fast-result"


@pytest.mark.asyncio
async def test_invoke_wraps_timeout():
    slow = FakeAdapter("slow", "too-late", delay=1.0, timeout=0.05)

    with pytest.raises(ProviderError, match="slow failed: timed out"):
        await slow.invoke("req")


@pytest.mark.asyncio
async def test_best_effort_degrades_to_none():
    failing = FakeAdapter("flaky", error=RuntimeError("503"))

    assert await best_effort(failing, "req", stage="quick_insights") is None
    assert await best_effort(FakeAdapter("ok", "value"), "req", stage="quick_insights") == "value"


@pytest.mark.asyncio
async def test_degraded_stage_logs_structured_fields(caplog):
    caplog.set_level(logging.WARNING, logger="app.services.pipeline.fallback")
    adapter = FakeAdapter("groq", error=RuntimeError("rate limited"))

    await best_effort(adapter, "transcript", stage="quick_insights")

    record = next(r for r in caplog.records if "Degraded" in r.getMessage())
    assert record.extra_data == {"stage": "quick_insights", "provider": "groq"}
