"""Validate decoded JSON against the Playwright report schema."""

import logging
from collections.abc import Mapping
from typing import Any

import pydantic

from boostsec.playwright_results.errors import ValidationError, ValidationIssue
from boostsec.playwright_results.models.report import Report

logger = logging.getLogger(__name__)


def validate_report(data: object) -> Report:
    """Validate a decoded JSON value and return the typed report.

    Args:
        data: Decoded JSON value of unknown shape

    Returns:
        Validated report

    Raises:
        ValidationError: If the value does not match the report schema. Every
            structural issue found is listed in ``issues``.

    """
    try:
        return Report.model_validate(data)
    except pydantic.ValidationError as e:
        issues = [_to_issue(error) for error in e.errors()]
        logger.warning(f"Report failed validation with {len(issues)} issue(s)")
        summary = ", ".join(issue.message for issue in issues)
        raise ValidationError(
            f"Invalid Playwright JSON report: {summary}", issues
        ) from e


def _to_issue(error: Mapping[str, Any]) -> ValidationIssue:
    """Convert a pydantic error entry into a validation issue."""
    path = ".".join(str(part) for part in error["loc"])
    return ValidationIssue(
        path=path or "<root>", expected=error["type"], message=error["msg"]
    )
