from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ComposedMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    subject: str
    html_body: str
    text_body: str
    reply_to: str


class DeliveryReceipt(BaseModel):
    sent: bool
    message_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def failed(cls, error: BaseException) -> "DeliveryReceipt":
        return cls(sent=False, error=f"{type(error).__name__}: {error}")


class InquiryResult(BaseModel):
    success: bool = True
    email_sent: bool
    vehicle: str
    submitted_at: datetime
    message_id: Optional[str] = None
