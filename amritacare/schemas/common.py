# amritacare/schemas/common.py
from pydantic import BaseModel, ConfigDict
from typing import Dict, Optional


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class ContactRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactResponse(BaseModel):
    success: bool = True
    via: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    services: Dict[str, bool]
