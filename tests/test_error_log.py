from __future__ import annotations

from pathlib import Path

from orbitcam.common.error_log import ErrorLog


def test_error_log_deduplicates_consecutive_same_error() -> None:
    log = ErrorLog(max_items=10)

    for tick in (3, 4):
        try:
            raise ValueError("boom")
        except Exception as e:
            log.log_exception(context="orbitcam.update", exc=e, tick=tick)

    items = log.items()
    assert len(items) == 1
    assert items[0].count == 2
    assert items[0].last_tick == 4
    assert "ValueError" in items[0].message
    assert items[0].summary_line().endswith("(x2)")


def test_error_log_keeps_tail_only() -> None:
    log = ErrorLog(max_items=3)
    for i in range(1, 5):
        log.log_message(context=f"c{i}", message=f"m{i}")

    items = log.items()
    assert len(items) == 3
    assert [it.context for it in items] == ["c2", "c3", "c4"]
    assert log.latest() is not None and log.latest().context == "c4"


def test_error_log_disabled_records_nothing() -> None:
    log = ErrorLog()
    log.enabled = False
    log.log_message(context="c", message="m")
    assert log.items() == []
    assert log.latest() is None


def test_error_log_persists_first_occurrence_only(tmp_path: Path) -> None:
    out = tmp_path / "logs" / "orbitcam-errors.log"
    log = ErrorLog(max_items=5, persist_path=out)
    log.log_message(context="orbitcam.settings", message="Rejected binding")

    for _ in range(3):
        try:
            raise RuntimeError("boom")
        except Exception as e:
            log.log_exception(context="orbitcam.update", exc=e)

    text = out.read_text(encoding="utf-8")
    assert "orbitcam.settings" in text
    assert "Rejected binding" in text
    assert text.count("RuntimeError: boom") == 2  # summary line + traceback tail, written once
    assert "Traceback" in text
