"""
Structured logging for visit log operations.
Wraps the stdlib logger so every layer emits the same operation/status/details lines.
"""

import logging
from typing import Any, Dict, List

class StructuredLogger:
    """Structured logger for visit log persistence and translation."""

    def __init__(self, name: str = "visitlog"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_visit_log_operation(self, operation: str, visit_log_id: str = None, visit_id: str = None,
                                status: str = "success", details: Dict[str, Any] = None):
        """Log a visit log service operation."""
        log_details = {}
        if visit_log_id is not None:
            log_details["visit_log_id"] = visit_log_id
        if visit_id is not None:
            log_details["visit_id"] = visit_id
        if details:
            log_details.update(details)

        self.log_operation(f"visit_log.{operation}", status, log_details)

    def log_store_error(self, operation: str, error: Exception, details: Dict[str, Any] = None):
        """Log a document store failure before it is surfaced to the caller."""
        log_details = {
            "error_type": type(error).__name__,
            "error": str(error)[:200]
        }
        if details:
            log_details.update(details)

        message = f"Operation: store.{operation}, Status: failed, Details: {log_details}"
        self.logger.error(message)

    def log_translation_issue(self, visit_log_id: str, visit_id: Any, reason: str):
        """Log a document that cannot be translated into its UI form."""
        log_details = {
            "visit_log_id": visit_log_id,
            "visit_id": visit_id,
            "reason": reason
        }
        message = f"Operation: translation.to_visit_log, Status: rejected, Details: {log_details}"
        self.logger.warning(message)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()

def audit_event(event_type: str, identifiers: Dict[str, Any], payload: Dict[str, Any] = None, sensitive_fields: List[str] = None):
    """General audit event logging; free-text fields are truncated or redacted."""
    if sensitive_fields is None:
        sensitive_fields = ['secret', 'password', 'token']

    log_details = identifiers.copy() if identifiers else {}

    if payload:
        log_details["payload"] = sanitize_payload(payload, sensitive_fields=sensitive_fields)

    logger.log_operation(event_type.replace(".", "_"), "audit", log_details)

def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for logging."""
    if sensitive_fields is None:
        sensitive_fields = ['secret', 'password', 'token']

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload
