# amritacare/routers/health_router.py
from datetime import datetime

from fastapi import APIRouter, Depends

from ..dependencies import Services, get_services
from ..schemas import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(services: Services = Depends(get_services)):
    """Liveness plus which integrations are configured (booleans only)"""
    settings = services.settings
    return HealthResponse(
        status="ok",
        timestamp=datetime.utcnow().isoformat(),
        services={
            "otp_secret": settings.otp_secret is not None,
            "sendgrid": settings.sendgrid_configured,
            "smtp": settings.smtp_configured,
        },
    )
