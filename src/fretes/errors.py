"""Error types surfaced to the user by the Fretes client."""

from typing import Optional

CONNECTION_ERROR_MESSAGE = "Erro de conexão com a API."


class ShippingError(Exception):
    """Base class for every error the client reports to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShippingError):
    """Input rejected locally, before any request is sent."""


class RequestError(ShippingError):
    """The shipping API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConnectivityError(RequestError):
    """The shipping API could not be reached at all."""

    def __init__(self, message: str = CONNECTION_ERROR_MESSAGE):
        super().__init__(message, status_code=None)
