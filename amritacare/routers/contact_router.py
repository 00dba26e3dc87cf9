# amritacare/routers/contact_router.py
from fastapi import APIRouter, Depends

from ..application.services.contact_service import ContactService
from ..dependencies import get_contact_service
from ..schemas import ContactRequest, ContactResponse

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post("/contact", response_model=ContactResponse)
def contact(payload: ContactRequest, contact_service: ContactService = Depends(get_contact_service)):
    """Forward a contact-form message to the support inbox"""
    via = contact_service.submit(payload.email, payload.message, payload.name)
    return ContactResponse(via=via)
