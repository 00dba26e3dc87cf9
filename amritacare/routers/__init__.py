# Routers package
from . import otp_router
from . import contact_router
from . import health_router

# Error code used when a request body is absent or not a JSON object
MISSING_FIELD_CODES = {
    "/auth/otp/issue": "missing_email",
    "/api/send-otp": "missing_email",
    "/auth/otp/verify": "missing_params",
    "/api/verify-otp": "missing_params",
    "/api/contact": "missing_fields",
}

__all__ = [
    "otp_router",
    "contact_router",
    "health_router",
    "MISSING_FIELD_CODES",
]
