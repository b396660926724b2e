from __future__ import annotations


class BillTrackError(Exception):
    """Base for errors surfaced to API clients as ``{statusCode, statusMessage}``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(BillTrackError):
    status_code = 400


class NotFoundError(BillTrackError):
    status_code = 404


class ExtractionError(BillTrackError):
    """The oracle answered, but not with a usable bill."""

    status_code = 422


class UpstreamUnavailableError(BillTrackError):
    status_code = 503


class ExtractionTimeoutError(UpstreamUnavailableError):
    status_code = 504
