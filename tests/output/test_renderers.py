"""Tests for the Rich renderers."""

from __future__ import annotations

from typing import Any

from regctl.output.renderers import render_quiet, render_result
from regctl.services.result import ServiceError, ServiceResult


def _record(**overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": "5f0c",
        "classification": "CERTIFICATE",
        "letter_date": "2023-05-01",
        "year": 2023,
        "register_no": 1,
        "register_display": "KET/2023/0001",
        "subject": "Domicile",
        "party": "",
        "status": "ACTIVE",
        "created_at": "2024-05-01T09:00:00+00:00",
        "updated_at": "2024-05-01T09:00:00+00:00",
    }
    record.update(overrides)
    return record


class TestLetterPanel:
    def test_issue_panel(self) -> None:
        output = render_result(ServiceResult(ok=True, op="issue", data=_record()))
        assert "OK" in output
        assert "KET/2023/0001" in output
        assert "Certificate Letter" in output
        assert "subject: Domicile" in output
        assert "party: -" in output
        assert "id: 5f0c" in output

    def test_verbose_panel_shows_timestamps(self) -> None:
        output = render_result(ServiceResult(ok=True, op="show", data=_record()), verbose=True)
        assert "sequence: 2023 #1" in output
        assert "created: 2024-05-01T09:00:00+00:00" in output

    def test_void_panel(self) -> None:
        output = render_result(ServiceResult(ok=True, op="void", data=_record(status="VOID")))
        assert "status: VOID" in output


class TestListRenderer:
    def test_table_and_totals(self) -> None:
        data = {
            "items": [_record(), _record(id="x", register_display="KET/2023/0002", status="VOID")],
            "count": 2,
            "filters": {},
            "stats": {"total": 3, "active": 2, "void": 1, "shown": 2},
        }
        output = render_result(ServiceResult(ok=True, op="list", data=data))
        assert "KET/2023/0001" in output
        assert "KET/2023/0002" in output
        assert "Total: 3 • Active: 2 • Void: 1 • Shown: 2" in output

    def test_empty_list(self) -> None:
        data = {"items": [], "count": 0, "filters": {}, "stats": {"total": 0}}
        output = render_result(ServiceResult(ok=True, op="list", data=data))
        assert "No letters match." in output


class TestCountersRenderer:
    def test_table(self) -> None:
        items = [
            {
                "classification": "OUTGOING",
                "label": "Outgoing Letter",
                "year": 2024,
                "last": 2,
                "display": "OUT/2024/0002",
            }
        ]
        output = render_result(ServiceResult(ok=True, op="counters", data={"items": items}))
        assert "Outgoing Letter" in output
        assert "OUT/2024/0002" in output

    def test_empty(self) -> None:
        output = render_result(ServiceResult(ok=True, op="counters", data={"items": []}))
        assert "No counters yet" in output


class TestOtherRenderers:
    def test_next_preview(self) -> None:
        data = {
            "classification": "OUTGOING",
            "year": 2024,
            "next_no": 3,
            "display": "OUT/2024/0003",
        }
        output = render_result(ServiceResult(ok=True, op="next", data=data))
        assert "OUT/2024/0003" in output
        assert "not reserved" in output

    def test_purge(self) -> None:
        data = {"id": "5f0c", "register_display": "KET/2023/0001", "removed": True}
        output = render_result(ServiceResult(ok=True, op="purge", data=data))
        assert "KET/2023/0001" in output
        assert "5f0c" in output

    def test_error(self) -> None:
        result = ServiceResult.failure("void", "NOT_FOUND", "No letter found with ID: x")
        output = render_result(result)
        assert output.startswith("ERROR")
        assert "No letter found with ID: x" in output
        assert "NOT_FOUND" not in output

    def test_verbose_error_shows_code(self) -> None:
        result = ServiceResult(
            ok=False,
            op="import",
            error=ServiceError(code="INVALID_PAYLOAD", message="bad", detail={"line": 2}),
        )
        output = render_result(result, verbose=True)
        assert "code: INVALID_PAYLOAD" in output
        assert "line: 2" in output

    def test_verbose_meta_telemetry(self) -> None:
        result = ServiceResult(
            ok=True,
            op="export",
            data={"path": "x.json"},
            meta={"telemetry": {"name": "TransferService.export_snapshot", "duration_ms": 1.5}},
        )
        output = render_result(result, verbose=True)
        assert "TransferService.export_snapshot" in output


class TestRenderQuiet:
    def test_items_list_display_numbers(self) -> None:
        data = {"items": [_record(), _record(register_display="KET/2023/0002")]}
        assert render_quiet(ServiceResult(ok=True, op="list", data=data)) == (
            "KET/2023/0001\nKET/2023/0002"
        )

    def test_counter_items_use_display(self) -> None:
        data = {"items": [{"display": "OUT/2024/0002"}]}
        assert render_quiet(ServiceResult(ok=True, op="counters", data=data)) == "OUT/2024/0002"

    def test_preview_display(self) -> None:
        data = {"display": "OUT/2024/0003"}
        assert render_quiet(ServiceResult(ok=True, op="next", data=data)) == "OUT/2024/0003"

    def test_fallback(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="reset", data={})) == "OK: reset"
