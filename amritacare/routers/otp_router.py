# amritacare/routers/otp_router.py
import logging

from fastapi import APIRouter, Depends

from ..application.services.otp_service import OtpService
from ..dependencies import get_otp_service
from ..schemas import IssueOTPRequest, IssueOTPResponse, VerifyOTPRequest, VerifyOTPResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/otp", tags=["OTP"])
legacy_router = APIRouter(prefix="/api", tags=["OTP"])


# Sync handlers: delivery blocks on network I/O, so FastAPI runs these in its threadpool
@router.post("/issue", response_model=IssueOTPResponse)
def issue_otp(payload: IssueOTPRequest, otp_service: OtpService = Depends(get_otp_service)):
    """
    Issue a signed OTP token and email the code to the address
    """
    issued = otp_service.issue(payload.email, payload.name)
    return IssueOTPResponse(token=issued.token, via=issued.via)


@router.post("/verify", response_model=VerifyOTPResponse)
def verify_otp(payload: VerifyOTPRequest, otp_service: OtpService = Depends(get_otp_service)):
    """
    Verify a token + code pair and return the authenticated email
    """
    email = otp_service.verify(payload.token, payload.code)
    return VerifyOTPResponse(email=email)


# Backward-compatible aliases for older clients expecting /api/send-otp and /api/verify-otp
@legacy_router.post("/send-otp", response_model=IssueOTPResponse)
def send_otp_legacy(payload: IssueOTPRequest, otp_service: OtpService = Depends(get_otp_service)):
    return issue_otp(payload, otp_service)


@legacy_router.post("/verify-otp", response_model=VerifyOTPResponse)
def verify_otp_legacy(payload: VerifyOTPRequest, otp_service: OtpService = Depends(get_otp_service)):
    return verify_otp(payload, otp_service)
