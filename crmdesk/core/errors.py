"""
Error hierarchy.

Every exception carries two messages:
- message: technical detail (for logs)
- user_message: safe string for the UI banner or notification
"""

from __future__ import annotations


class CRMError(Exception):
    """Base exception for all crmdesk errors."""

    def __init__(self, message: str, user_message: str | None = None) -> None:
        self.message = message
        self.user_message = user_message or message
        super().__init__(message)


class ConfigurationError(CRMError):
    """Required configuration is missing or invalid at startup."""


class BackendError(CRMError):
    """Transport or backend failure reported by the data API."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        user_message: str | None = None,
    ) -> None:
        super().__init__(
            message,
            user_message=user_message or "The CRM backend could not complete the request.",
        )
        self.status_code = status_code


class ValidationFailed(CRMError):
    """Form validation failed. Holds every failing field at once."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(
            f"Validation failed for: {fields}",
            user_message="Please fix the errors in the form",
        )


class RecordNotFound(CRMError):
    """A record id is not present in the local collection."""

    def __init__(self, entity: str, record_id: int | str) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(
            f"{entity} {record_id!r} not found",
            user_message=f"{entity.capitalize()} not found",
        )


class DeleteNotConfirmed(CRMError):
    """Confirm was called without a pending delete request."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(
            f"No pending {entity} delete to confirm",
            user_message="Nothing to delete",
        )
