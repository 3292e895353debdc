"""Domain error taxonomy.

Use cases raise these; the API layer maps them to HTTP responses.
"""


class DomainError(Exception):
    """Base class for expected, caller-visible failures."""

    code = "domain_error"


class ValidationError(DomainError):
    """Malformed input (empty reason, empty note text, unknown action)."""

    code = "validation_error"


class InvalidTransition(DomainError):
    """Requested status change is not allowed by the assignment state machine."""

    code = "invalid_transition"


class PreconditionFailed(DomainError):
    """Stage or status gate not satisfied for the requested operation."""

    code = "precondition_failed"


class StageGateBlocked(PreconditionFailed):
    """Event may not advance: no carrier has been awarded yet."""

    code = "stage_gate_blocked"


class ConflictError(DomainError):
    """Stored state changed since it was read. Refresh and retry."""

    code = "conflict"


class NotFoundError(DomainError):
    """Referenced assignment, event, note or carrier does not exist."""

    code = "not_found"


class ExternalServiceError(DomainError):
    """Directory, notification sink or document store is unavailable."""

    code = "external_service_error"
