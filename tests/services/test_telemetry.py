"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from regctl.core.registration import RegistrationService
from regctl.services.register import RegisterService
from regctl.services.result import ServiceResult
from regctl.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ── Span unit tests ──────────────────────────────────────────────────


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "duration_ms" in d
        assert "children" not in d
        assert "annotations" not in d

    def test_to_dict_with_children(self) -> None:
        root = Span(name="root")
        child = Span(name="child", parent=root)
        root.children.append(child)
        child.end()
        root.end()
        assert root.to_dict()["children"][0]["name"] == "child"

    def test_annotate(self) -> None:
        span = Span(name="test")
        span.annotate("letters", 3)
        assert span.to_dict()["annotations"] == {"letters": 3}


# ── trace_span ───────────────────────────────────────────────────────


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("child") as span:
            assert span is None

    def test_no_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("orphan") as span:
            assert span is None


# ── @traced ──────────────────────────────────────────────────────────


class _Probe:
    @traced
    def run(self) -> ServiceResult:
        with trace_span("step") as span:
            if span is not None:
                span.annotate("ok", True)
        return ServiceResult(ok=True, op="probe")

    @traced
    def explode(self) -> ServiceResult:
        raise RuntimeError("boom")


class TestTraced:
    def test_disabled_leaves_meta_empty(self) -> None:
        assert _Probe().run().meta is None

    def test_enabled_injects_span_tree(self) -> None:
        enable_telemetry()
        result = _Probe().run()
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "_Probe.run"
        assert tree["children"][0]["name"] == "step"
        assert tree["children"][0]["annotations"] == {"ok": True}

    def test_exception_propagates_and_resets_span(self) -> None:
        enable_telemetry()
        with pytest.raises(RuntimeError, match="boom"):
            _Probe().explode()
        assert _current_span.get() is None

    def test_service_methods_are_traced(self, registry: RegistrationService) -> None:
        enable_telemetry()
        result = RegisterService(registry).issue(
            "outgoing", "Budget report", letter_date="2024-03-15"
        )
        assert result.meta is not None
        tree = result.meta["telemetry"]
        assert tree["name"] == "RegisterService.issue"
        assert [child["name"] for child in tree["children"]] == ["registry.issue"]
