"""Parse Playwright JSON reports into normalized test runs."""

import asyncio
import json
import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from boostsec.playwright_results.errors import ValidationError
from boostsec.playwright_results.models.normalized import NormalizedTestRun
from boostsec.playwright_results.normalizer import normalize_report
from boostsec.playwright_results.validator import validate_report

logger = logging.getLogger(__name__)

ReportSource = str | os.PathLike[str] | bytes | bytearray | memoryview | Mapping | list

INVALID_INPUT_MESSAGE = "Input must be a file path string, JSON object, or Buffer"


async def read_report_file(path: Path) -> str:
    """Read a report file as UTF-8 text."""
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


async def parse_report(source: ReportSource) -> NormalizedTestRun:
    """Parse a Playwright JSON report.

    Args:
        source: Path to a report file, raw report bytes, or an already
            decoded JSON object

    Returns:
        Normalized test run

    Raises:
        TypeError: If the source is of an unsupported type
        FileNotFoundError: If the report file doesn't exist
        ValidationError: If the content is not JSON or doesn't match the
            report schema

    """
    if isinstance(source, (str, os.PathLike)):
        data = await _load_file(Path(source))
    elif isinstance(source, (bytes, bytearray, memoryview)):
        data = _load_buffer(bytes(source))
    elif isinstance(source, (Mapping, list)):
        data = source
    else:
        raise TypeError(INVALID_INPUT_MESSAGE)

    report = validate_report(data)
    return normalize_report(report)


async def parse_reports(sources: Sequence[ReportSource]) -> list[NormalizedTestRun]:
    """Parse several reports concurrently, keeping the input order."""
    return list(await asyncio.gather(*(parse_report(source) for source in sources)))


async def _load_file(path: Path) -> object:
    """Read and decode a report file."""
    logger.debug(f"Reading report file: {path}")
    try:
        content = await read_report_file(path)
    except FileNotFoundError as e:
        raise FileNotFoundError(f"File not found: {path}") from e
    except UnicodeDecodeError as e:
        raise ValidationError(f"Invalid JSON in file {path}: {e}") from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in file {path}: {e}") from e


def _load_buffer(content: bytes) -> object:
    """Decode report bytes as UTF-8 JSON."""
    try:
        return json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Invalid JSON in buffer: {e}") from e
