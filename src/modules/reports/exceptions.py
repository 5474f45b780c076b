"""Report domain exceptions."""

from __future__ import annotations


class ReportNotFound(Exception):
    """No stored weekly report has the requested id."""


class ReportGenerationError(Exception):
    """A report could not be produced (invalid range or storage failure)."""
