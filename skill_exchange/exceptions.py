"""
Domain exceptions raised by the service layer.

Each exception carries the HTTP status code that the routers translate it
to, so services never import FastAPI.
"""


class ExchangeError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ExchangeError):
    status_code = 400


class InsufficientCredits(ExchangeError):
    status_code = 400


class NotAuthorized(ExchangeError):
    status_code = 403


class NotFound(ExchangeError):
    status_code = 404
