"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class FetchError(AppError):
    """Raised when transactions or live prices cannot be retrieved."""

    def __init__(self, title: str, message: str):
        self.title = title
        super().__init__(f"{title}: {message}", code="FETCH_FAILED")


class IngestionInProgressError(AppError):
    """Raised when an ingestion cycle is started while another is running."""

    def __init__(self, account_id: str):
        super().__init__(
            f"Ingestion already in progress for journal {account_id}",
            code="INGESTION_IN_PROGRESS",
        )


class LedgerFormatError(AppError):
    """Raised when a persisted ledger cannot be decoded."""

    def __init__(self, message: str):
        super().__init__(f"Unreadable ledger: {message}", code="LEDGER_FORMAT")
