"""Error kinds surfaced by the relay as `success: false` JSON bodies."""


class RelayError(Exception):
    """Base error carrying the HTTP status and optional provider details."""

    status_code = 500
    error_type = "RELAY_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error: str | None = None,
        status: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.error = error
        self.status = status

    def to_body(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        if self.status is not None:
            body["status"] = self.status
        return body


class ValidationError(RelayError):
    """Caller input is missing or malformed."""

    status_code = 400
    error_type = "VALIDATION"


class GatewayError(RelayError):
    """Paystack rejected the operation or the call itself failed."""

    status_code = 500
    error_type = "GATEWAY"


class VerificationError(RelayError):
    """Paystack answered, but the transaction did not end in success."""

    status_code = 400
    error_type = "VERIFICATION"
