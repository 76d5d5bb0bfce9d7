"""
Errors surfaced by the visit log service.

Each error carries the HTTP status the API layer answers with.
"""


class VisitLogError(Exception):
    """Base class for visit log failures."""
    error_type = "VISIT_LOG_ERROR"
    http_status = 500


class VisitLogNotFoundError(VisitLogError):
    error_type = "NOT_FOUND"
    http_status = 404

    def __init__(self, visit_log_id: str):
        self.visit_log_id = visit_log_id
        super().__init__(f"Visit Log with ID {visit_log_id} not found")


class MissingParentError(VisitLogError):
    error_type = "MISSING_PARENT"
    http_status = 422

    def __init__(self, message: str = "Visit Log requires a visit"):
        super().__init__(message)


class DataCorruptionError(VisitLogError):
    """A stored document cannot be read back; needs manual intervention."""
    error_type = "DATA_CORRUPTION"
    http_status = 500

    def __init__(self, visit_log_id: str, visit_id):
        self.visit_log_id = visit_log_id
        self.visit_id = visit_id
        super().__init__(f"Visit Log {visit_log_id} has unreadable visitId {visit_id!r}")


class StoreUnavailableError(VisitLogError):
    error_type = "STORE_UNAVAILABLE"
    http_status = 503

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Document store unavailable during {operation}")


class OperationCancelledError(VisitLogError):
    error_type = "CANCELLED"
    http_status = 499

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Visit log operation {operation} was cancelled")
