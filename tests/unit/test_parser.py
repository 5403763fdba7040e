"""Tests for the report parsing entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from boostsec.playwright_results.errors import ValidationError
from boostsec.playwright_results.parser import (
    INVALID_INPUT_MESSAGE,
    parse_report,
    parse_reports,
    read_report_file,
)


async def test_parse_report_from_path(fixtures_dir: Path) -> None:
    """parse_report reads and normalizes a report file path string."""
    run = await parse_report(str(fixtures_dir / "simple-pass.json"))

    assert len(run.tests) == 1
    assert run.tests[0].status == "passed"
    assert run.tests[0].title == "basic test"
    assert run.totals.passed == 1
    assert run.totals.total == 1


async def test_parse_report_from_path_object(fixtures_dir: Path) -> None:
    """parse_report accepts pathlib paths."""
    run = await parse_report(fixtures_dir / "with-failures.json")

    assert run.totals.total == 3


async def test_parse_report_from_object(fixtures_dir: Path) -> None:
    """parse_report uses decoded JSON objects as is."""
    data = json.loads((fixtures_dir / "simple-pass.json").read_text())

    run = await parse_report(data)

    assert run.tests[0].status == "passed"


async def test_parse_report_from_bytes(fixtures_dir: Path) -> None:
    """parse_report decodes raw bytes."""
    content = (fixtures_dir / "simple-pass.json").read_bytes()

    run = await parse_report(content)

    assert run.tests[0].status == "passed"
    assert (await parse_report(bytearray(content))).totals.total == 1


async def test_parse_report_empty_report() -> None:
    """parse_report handles a report without tests."""
    run = await parse_report({"config": {"projects": []}, "suites": []})

    assert run.totals.total == 0
    assert run.totals.passed == 0
    assert run.totals.failed == 0
    assert run.totals.skipped == 0
    assert run.tests == []


async def test_parse_report_file_not_found(tmp_path: Path) -> None:
    """parse_report reports missing files with their path."""
    missing = tmp_path / "missing.json"

    with pytest.raises(FileNotFoundError, match="File not found") as exc_info:
        await parse_report(str(missing))

    assert str(missing) in str(exc_info.value)


async def test_parse_report_malformed_file(fixtures_dir: Path) -> None:
    """parse_report raises ValidationError for broken JSON files."""
    with pytest.raises(ValidationError, match="Invalid JSON in file") as exc_info:
        await parse_report(str(fixtures_dir / "malformed.json"))

    assert exc_info.value.issues == []


async def test_parse_report_invalid_utf8_file(tmp_path: Path) -> None:
    """parse_report raises ValidationError for files that aren't UTF-8."""
    report = tmp_path / "report.json"
    report.write_bytes(b"\xff\xfe{}")

    with pytest.raises(ValidationError, match="Invalid JSON in file") as exc_info:
        await parse_report(str(report))

    assert str(report) in str(exc_info.value)
    assert exc_info.value.issues == []


async def test_parse_report_malformed_buffer() -> None:
    """parse_report raises ValidationError for broken JSON bytes."""
    with pytest.raises(ValidationError, match="Invalid JSON in buffer"):
        await parse_report(b"invalid json{")


async def test_parse_report_invalid_utf8_buffer() -> None:
    """parse_report raises ValidationError for bytes that aren't UTF-8."""
    with pytest.raises(ValidationError, match="Invalid JSON in buffer"):
        await parse_report(b"\xff\xfe{}")


@pytest.mark.parametrize("source", [123, None, True, 4.5])
async def test_parse_report_invalid_input_type(source: object) -> None:
    """parse_report rejects unsupported input types before decoding."""
    with pytest.raises(TypeError) as exc_info:
        await parse_report(source)  # type: ignore[arg-type]

    assert str(exc_info.value) == INVALID_INPUT_MESSAGE


async def test_parse_report_schema_error() -> None:
    """parse_report surfaces schema issues through ValidationError."""
    with pytest.raises(ValidationError) as exc_info:
        await parse_report({"config": {}, "suites": "not an array"})

    assert exc_info.value.issues
    assert exc_info.value.issues[0].path == "suites"


async def test_parse_report_mocked_missing_file() -> None:
    """parse_report translates the reader's not-found error."""
    reader = AsyncMock(side_effect=FileNotFoundError("no such file"))

    with patch("boostsec.playwright_results.parser.read_report_file", reader):
        with pytest.raises(FileNotFoundError, match="File not found: /nonexistent.json"):
            await parse_report("/nonexistent.json")


async def test_parse_report_propagates_read_errors() -> None:
    """parse_report lets other read errors through unchanged."""
    error = PermissionError("Permission denied")
    reader = AsyncMock(side_effect=error)

    with patch("boostsec.playwright_results.parser.read_report_file", reader):
        with pytest.raises(PermissionError) as exc_info:
            await parse_report("/protected.json")

    assert exc_info.value is error


async def test_parse_report_mocked_invalid_json() -> None:
    """parse_report wraps decode errors of the file content."""
    reader = AsyncMock(return_value="invalid json{")

    with patch("boostsec.playwright_results.parser.read_report_file", reader):
        with pytest.raises(ValidationError, match="Invalid JSON in file /invalid.json"):
            await parse_report("/invalid.json")

    reader.assert_awaited_once_with(Path("/invalid.json"))


async def test_read_report_file(tmp_path: Path) -> None:
    """read_report_file returns the UTF-8 content of the file."""
    report = tmp_path / "report.json"
    report.write_text('{"suites": [], "title": "café › ok"}', encoding="utf-8")

    assert await read_report_file(report) == '{"suites": [], "title": "café › ok"}'


async def test_parse_reports_keeps_order(fixtures_dir: Path) -> None:
    """parse_reports parses several sources and keeps their order."""
    runs = await parse_reports(
        [fixtures_dir / "with-failures.json", fixtures_dir / "simple-pass.json"]
    )

    assert [run.totals.total for run in runs] == [3, 1]
