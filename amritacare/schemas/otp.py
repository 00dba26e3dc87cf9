# amritacare/schemas/otp.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Optional


class IssueOTPRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: Optional[str] = Field(None, description="Address the code is sent to")
    name: Optional[str] = Field(None, description="Display name used in the greeting")


class IssueOTPResponse(BaseModel):
    success: bool = True
    token: str
    via: str


class VerifyOTPRequest(BaseModel):
    # Older clients send the code as "otp", sometimes as a number
    model_config = ConfigDict(coerce_numbers_to_str=True)

    token: Optional[str] = None
    code: Optional[str] = Field(None, validation_alias=AliasChoices("code", "otp"))


class VerifyOTPResponse(BaseModel):
    success: bool = True
    email: str
