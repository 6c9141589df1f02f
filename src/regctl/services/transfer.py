"""TransferService — snapshot export, import, and full reset.

The export file is the interchange format: a JSON object with a
``counters`` mapping and a newest-first ``letters`` list.  Importing
replaces the whole register; a rejected file leaves it untouched.
"""

from __future__ import annotations

import json
from pathlib import Path

from regctl.domain.errors import PersistenceError, RegisterValidationError
from regctl.services._helpers import today_iso
from regctl.services.base import BaseService
from regctl.services.result import ServiceResult
from regctl.services.telemetry import trace_span, traced


def default_export_name(prefix: str) -> str:
    """``<prefix>-<YYYY-MM-DD>.json``"""
    return f"{prefix}-{today_iso()}.json"


class TransferService(BaseService):
    """Move the whole register in and out as a JSON document."""

    @traced
    def export_snapshot(self, output: Path, *, indent: int | None = 2) -> ServiceResult:
        """Write the current snapshot to *output*."""
        op = "export"
        snapshot = self._registry.snapshot()
        text = json.dumps(snapshot.to_payload(), indent=indent, ensure_ascii=False)
        try:
            with trace_span("write"):
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(text + "\n", encoding="utf-8")
        except OSError as exc:
            return ServiceResult.failure(op, "IO_ERROR", f"Cannot write {output}: {exc}")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(output),
                "counters": len(snapshot.counters),
                "letters": len(snapshot.letters),
            },
        )

    @traced
    def import_snapshot(self, source: Path, *, strict: bool = False) -> ServiceResult:
        """Replace the register with the snapshot stored in *source*.

        With *strict*, letters numbered above their counter (or sharing a
        number) reject the file; otherwise they are reported as warnings.
        """
        op = "import"
        try:
            raw = source.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_PAYLOAD",
                f"{source} is not UTF-8 text: {exc.reason}",
                detail={"offset": exc.start},
            )
        except OSError as exc:
            return ServiceResult.failure(op, "IO_ERROR", f"Cannot read {source}: {exc}")

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_PAYLOAD",
                f"{source} is not valid JSON: {exc.msg}",
                detail={"line": exc.lineno, "column": exc.colno},
            )

        try:
            with trace_span("restore"):
                issues = self._registry.restore_snapshot(payload, strict=strict)
        except RegisterValidationError as exc:
            return ServiceResult.failure(op, "INVALID_PAYLOAD", str(exc))
        except PersistenceError as exc:
            return self._error(op, exc)

        snapshot = self._registry.snapshot()
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(source),
                "counters": len(snapshot.counters),
                "letters": len(snapshot.letters),
            },
            warnings=issues,
        )

    @traced
    def reset(self) -> ServiceResult:
        """Wipe every counter and letter."""
        op = "reset"
        before = self._registry.snapshot()
        try:
            self._registry.reset()
        except PersistenceError as exc:
            return self._error(op, exc)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "counters_cleared": len(before.counters),
                "letters_cleared": len(before.letters),
            },
        )
