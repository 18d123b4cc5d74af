class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced coach, student or payroll row does not exist."""


class SettingsMissingError(DomainError):
    """Raised when the system settings row has not been bootstrapped."""


class PayrollLockedError(DomainError):
    """Raised when a paid payroll row would be modified."""


class PeriodAlreadyPaidError(DomainError):
    """Raised when a distribution targets a period that already has paid rows."""

    def __init__(self, period_month: str):
        super().__init__(f"Period {period_month} has already been paid; double payment blocked")
        self.period_month = period_month


class DistributionError(DomainError):
    """Raised when a distribution failed and every row update was rolled back."""
