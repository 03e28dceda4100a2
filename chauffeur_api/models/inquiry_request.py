import datetime as dt
from typing import Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class InquiryRequest(BaseModel):
    """Raw inquiry as posted by the website. Nothing here is trusted yet."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vehicle_id: Optional[Union[int, str]] = Field(None, alias="vehicleId")
    purpose: Optional[str] = None
    date: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    verification_token: Optional[str] = Field(
        None,
        alias="captchaToken",
        validation_alias=AliasChoices("captchaToken", "verificationToken", "verification_token"),
    )


class ValidatedInquiry(InquiryRequest):
    requested_date: dt.date
    vehicle_number: Optional[int] = None
