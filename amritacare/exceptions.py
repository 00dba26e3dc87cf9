from fastapi import Request
from fastapi.responses import JSONResponse


class AmritaCareError(Exception):
    """Base error carrying a stable, client-facing error code."""

    code = "server_error"
    status_code = 500

    def __init__(self, message: str = "", code: str = None):
        if code is not None:
            self.code = code
        super().__init__(message or self.code)


class ConfigurationError(AmritaCareError):
    # Never say which credential is missing
    code = "secret_not_configured"
    status_code = 500


class MissingFieldsError(AmritaCareError):
    code = "missing_params"
    status_code = 400


class MalformedTokenError(AmritaCareError):
    code = "malformed_token"
    status_code = 400


class InvalidSignatureError(AmritaCareError):
    code = "invalid_signature"
    status_code = 400


class ExpiredError(AmritaCareError):
    code = "expired"
    status_code = 400


class InvalidCodeError(AmritaCareError):
    code = "invalid_code"
    status_code = 400


class TooManyAttemptsError(AmritaCareError):
    code = "too_many_attempts"
    status_code = 429


class TokenAlreadyUsedError(AmritaCareError):
    code = "token_used"
    status_code = 400


class DeliveryError(AmritaCareError):
    code = "delivery_failed"
    status_code = 500


def create_error_response(error_code: str) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "error": error_code
    }


async def amritacare_exception_handler(request: Request, exc: AmritaCareError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.code)
    )
