"""Error taxonomy shared by the scaffold pipeline and the registry proxy.

Every error carries the HTTP status the API layer reports for it, so the
FastAPI exception handlers never need a lookup table of their own.
"""

from __future__ import annotations


class KitforgeError(Exception):
    """Base class for every error raised by kitforge."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict[str, str]:
        """Return the structured error document sent to callers."""
        return {"error": self.message, "code": self.code}


class ConfigurationError(KitforgeError):
    """A selection axis or request parameter is missing or invalid."""

    status_code = 400


class TemplateMissing(KitforgeError):
    """No base template exists for the requested output language."""

    status_code = 400


class WriteFailure(KitforgeError):
    """A filesystem operation failed while assembling the working tree."""

    status_code = 500


class ArchiveFailure(KitforgeError):
    """Compressing or streaming the working tree failed."""

    status_code = 500


class Interrupted(KitforgeError):
    """The run was torn down by an external termination request.

    Never reported to an HTTP caller: the request ends with the server.
    """


class UpstreamError(KitforgeError):
    """The package registry could not be reached or answered with an error."""

    status_code = 500


class NotFound(KitforgeError):
    """The package registry has no package with the requested name."""

    status_code = 404
