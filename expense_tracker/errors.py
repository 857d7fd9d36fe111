from typing import Optional


class TrackerError(Exception):
    """Base class for errors raised by the tracker package."""


class BudgetConfigurationError(TrackerError, ValueError):
    """A budget cannot be evaluated because its limit is not positive."""

    def __init__(self, category: str, limit):
        self.category = category
        self.limit = limit
        super().__init__(f"Budget for {category} has a non-positive limit: {limit}")


class ValidationError(TrackerError, ValueError):
    """Input rejected at the boundary. `details` is the validator's error dict."""

    def __init__(self, details: dict):
        self.details = details
        super().__init__(details.get("message", "invalid input"))


class EmptyReportError(TrackerError):

    def __init__(self, title: str, period_label: Optional[str] = None):
        self.title = title
        self.period_label = period_label
        where = f" for {period_label}" if period_label else ""
        super().__init__(f"{title}{where} has no transactions to export")
