"""Error hierarchy for failures the gateway originates itself."""


class GatewayError(Exception):
    """Base exception; ``status_code`` is the HTTP status reported to the client."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PayloadValidationError(GatewayError):
    """The client payload is missing a required field or names an unknown mode."""

    status_code = 400


class BackendUnavailableError(GatewayError):
    """The backend could not be reached or did not answer before the deadline."""

    status_code = 500


__all__ = ["GatewayError", "PayloadValidationError", "BackendUnavailableError"]
