"""Exception types raised by the stores and services.

ValidationError derives from ValueError so callers that already catch
ValueError (the UI forms) keep working unchanged.
"""


class BudgetTrackerError(Exception):
    """Base class for every error the application raises on purpose."""


class ValidationError(BudgetTrackerError, ValueError):
    """Bad input: non-positive amount, empty description, bad month, ..."""


class NotFoundError(BudgetTrackerError, LookupError):
    """A record that was expected to exist is missing."""


class StorageError(BudgetTrackerError):
    """An opaque failure from the underlying database."""


class AlreadyAppliedError(BudgetTrackerError):
    """Carry-over was already applied for the given source month."""

    def __init__(self, from_year: int, from_month: int):
        super().__init__(
            f"Carry-over has already been applied for {from_year}/{from_month:02d}."
        )
        self.from_year = from_year
        self.from_month = from_month


class RunDueError(BudgetTrackerError):
    """A template failed while running due templates.

    `created` is the number of transactions committed before the failure;
    the underlying exception is available as __cause__.
    """

    def __init__(self, template_id: int, created: int, reason: str):
        super().__init__(
            f"Recurring template {template_id} failed after {created} "
            f"transaction(s) were created: {reason}"
        )
        self.template_id = template_id
        self.created = created
