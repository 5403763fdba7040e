"""Errors raised while reading and validating reports."""

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    """A single structural problem found in a report."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Dotted location of the offending field")
    expected: str = Field(..., description="Kind of value the schema expected")
    message: str = Field(..., description="Human readable description")


class ValidationError(ValueError):
    """Report is not valid JSON or does not match the report schema."""

    def __init__(
        self, message: str, issues: list[ValidationIssue] | None = None
    ) -> None:
        """Initialize with a summary message and the structural issues."""
        super().__init__(message)
        self.message = message
        self.issues: list[ValidationIssue] = list(issues or [])
