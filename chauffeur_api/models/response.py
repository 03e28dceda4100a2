from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(CamelModel):
    status: str = "ok"
    timestamp: datetime
    vehicles_loaded: bool = Field(..., alias="vehiclesLoaded")
    environment: str
    email_enabled: bool = Field(..., alias="emailEnabled")


class InquiryData(CamelModel):
    vehicle: str
    inquiry_date: datetime = Field(..., alias="inquiryDate")


class InquiryResponse(CamelModel):
    success: bool = True
    message: str = "Inquiry received successfully"
    email_sent: bool = Field(..., alias="emailSent")
    data: InquiryData


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[ErrorDetail] = None


class VerificationResult(BaseModel):
    valid: bool
    score: Optional[float] = None
    action: Optional[str] = None
    error_codes: List[str] = Field(default_factory=list)
