from .otp import IssueOTPRequest, IssueOTPResponse, VerifyOTPRequest, VerifyOTPResponse
from .common import ErrorResponse, ContactRequest, ContactResponse, HealthResponse

__all__ = [
    "IssueOTPRequest",
    "IssueOTPResponse",
    "VerifyOTPRequest",
    "VerifyOTPResponse",
    "ErrorResponse",
    "ContactRequest",
    "ContactResponse",
    "HealthResponse",
]
