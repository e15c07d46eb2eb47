"""Typed errors raised by stores, the approval workflow and the API layer."""

from __future__ import annotations

from typing import Any

# Literal values the web client has been observed sending in place of an id.
PLACEHOLDER_IDENTIFIERS = frozenset({"undefined", "null"})


class TempleHubError(Exception):
    """Base error carrying a stable code and the HTTP status it maps to."""

    code = "internal.error"
    status_code = 500
    default_message = "Internal error"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        if code is not None:
            self.code = code
        self.meta = dict(meta or {})

    def to_envelope(self) -> dict[str, Any]:
        """Render the error as the API's failure envelope."""
        payload: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error": self.code,
        }
        payload.update(self.meta)
        return payload


class InvalidIdentifierError(TempleHubError):
    """A path identifier was missing, blank, or a client placeholder."""

    code = "request.invalid_identifier"
    status_code = 400
    default_message = "Invalid identifier"

    def __init__(self, received: str | None, *, label: str = "ID") -> None:
        super().__init__(
            f'Invalid {label} received: "{received}". '
            f"Please ensure the {label} is properly set by the client.",
            meta={
                "received_id": received,
                "hint": f'Check that the object has a valid "id" property for the {label}',
            },
        )


class ValidationError(TempleHubError):
    code = "request.validation_error"
    status_code = 400
    default_message = "Validation error"


class ConflictError(TempleHubError):
    code = "request.conflict"
    status_code = 400
    default_message = "Conflict"


class InvalidTransitionError(ConflictError):
    """A record was asked to move between statuses it cannot."""

    code = "application.invalid_transition"

    def __init__(
        self,
        current: str,
        target: str,
        *,
        subject: str = "Application",
        code: str | None = None,
    ) -> None:
        super().__init__(
            f"{subject} is already {current} and cannot be {target}",
            code=code,
            meta={"current_status": current, "requested_status": target},
        )


class NotFoundError(TempleHubError):
    code = "resource.not_found"
    status_code = 404
    default_message = "Not found"


class PersistenceError(TempleHubError):
    """The datastore rejected or failed a statement."""

    code = "persistence.error"
    status_code = 500
    default_message = "Database operation failed"


def ensure_identifier(value: str | None, *, label: str = "ID") -> str:
    """Return the stripped identifier or raise InvalidIdentifierError.

    Rejects ``None``, empty and whitespace-only strings, and the literal
    strings ``"undefined"`` and ``"null"``.
    """
    if value is None:
        raise InvalidIdentifierError(value, label=label)
    stripped = value.strip()
    if not stripped or stripped in PLACEHOLDER_IDENTIFIERS:
        raise InvalidIdentifierError(value, label=label)
    return stripped
