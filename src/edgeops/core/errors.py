"""Error types shared by the edge-ops core and its adapters.

Adapters translate transport and decoding failures into these types so the
CLI only has to know about ``EdgeOpsError``. Every error may carry a ``hint``
with a follow-up command for the user.
"""

from __future__ import annotations


class EdgeOpsError(RuntimeError):
    """Base class for all errors surfaced to the CLI."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class InvalidRegion(EdgeOpsError):
    """Raised when a user-supplied region is not in the region catalog."""

    def __init__(self, region: str) -> None:
        super().__init__(
            f"region '{region}' is not a valid one",
            hint="Run `edgeops db regions` for a list of valid region IDs.",
        )
        self.region = region


class ProbeFailed(EdgeOpsError):
    """Raised by the region probe; resolvers recover from it with a fallback."""


class NotAuthenticatedOrNotFound(EdgeOpsError):
    """The database could not be looked up, or the stored token is not valid."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(
            message or f"database {name} not found or you are not logged in",
            hint="Check the name with `edgeops db list` or log in again with "
            "`edgeops auth token <token>`.",
        )
        self.name = name


class InstanceCreationFailed(EdgeOpsError):
    """The database was created but its first instance was not."""

    def __init__(self, database_name: str, cause: Exception) -> None:
        super().__init__(
            f"failed to create instance for database {database_name}: {cause}",
            hint=f"Database {database_name} exists without instances; destroy it "
            f"with `edgeops db destroy {database_name}` or retry.",
        )
        self.database_name = database_name


class MalformedResponse(EdgeOpsError):
    """A control-plane response is missing a field or has the wrong type."""


class RemoteRequestFailed(EdgeOpsError):
    """The control plane could not be reached or answered with a non-2xx status."""

    def __init__(
        self, operation: str, status: int | None = None, detail: str | None = None
    ) -> None:
        if status is None:
            message = f"{operation} failed: {detail or 'no response'}"
        else:
            message = f"{operation} failed: HTTP {status}"
            if detail:
                message = f"{message} ({detail})"
        super().__init__(message)
        self.operation = operation
        self.status = status


class LocalSettingsUnreadable(EdgeOpsError):
    """The local settings file cannot be read or written, or lacks required data."""


class OperationNotSupported(EdgeOpsError):
    """The operation does not apply to this database type."""


class InstanceNotFound(EdgeOpsError):
    """No matching instance exists for the database."""


class MissingArgument(EdgeOpsError):
    """A required command input is empty."""
