from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from chauffeur_api.core.errors import (
    MailDispatchError,
    MissingTokenError,
    VehicleNotFoundError,
    VerificationFailedError,
)
from chauffeur_api.core.logger import get_logger
from chauffeur_api.models.email_message import ComposedMessage, DeliveryReceipt, InquiryResult
from chauffeur_api.models.inquiry_request import InquiryRequest
from chauffeur_api.models.response import VerificationResult
from chauffeur_api.services.email_service import compose_inquiry_email
from chauffeur_api.services.inquiry_validator import validate_inquiry
from chauffeur_api.services.vehicle_service import VehicleCatalog

logger = get_logger(__name__)


class MailSender(Protocol):
    enabled: bool

    async def send(self, message: ComposedMessage) -> DeliveryReceipt:
        ...


class Verifier(Protocol):
    async def verify(self, token: str, expected_action: Optional[str] = None) -> VerificationResult:
        ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InquiryPipeline:
    """
    Runs one inquiry through validation, vehicle lookup, the bot check,
    composition and dispatch.

    Client errors are raised as ``ApiError`` subclasses and stop the flow.
    Mail delivery is best effort: once the first four steps pass the inquiry
    is accepted and ``email_sent`` reports what actually happened.
    """

    def __init__(
        self,
        catalog: VehicleCatalog,
        verifier: Verifier,
        mail_sender: MailSender,
        require_verification: bool = True,
        allow_past_dates: bool = False,
        expected_action: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.catalog = catalog
        self.verifier = verifier
        self.mail_sender = mail_sender
        self.require_verification = require_verification
        self.allow_past_dates = allow_past_dates
        self.expected_action = expected_action
        self._clock = clock

    async def submit_inquiry(self, raw: InquiryRequest) -> InquiryResult:
        now = self._clock()

        inquiry = validate_inquiry(raw, today=now.date(), allow_past_dates=self.allow_past_dates)

        vehicle = None
        if inquiry.vehicle_number is not None:
            vehicle = await self.catalog.find_vehicle(inquiry.vehicle_number)
        if vehicle is None:
            raise VehicleNotFoundError(raw.vehicle_id)

        if self.require_verification:
            await self._verify(inquiry.verification_token)

        message = compose_inquiry_email(inquiry, vehicle, now=now)
        receipt = await self._dispatch(message)

        logger.info(f"Inquiry submitted vehicleId={vehicle.id} vehicle={vehicle.name} emailSent={receipt.sent}")
        return InquiryResult(
            email_sent=receipt.sent,
            vehicle=vehicle.name,
            submitted_at=now,
            message_id=receipt.message_id,
        )

    async def _verify(self, token: Optional[str]) -> None:
        if not token or not token.strip():
            raise MissingTokenError()

        result = await self.verifier.verify(token, self.expected_action)
        if not result.valid:
            raise VerificationFailedError(result.error_codes)

    async def _dispatch(self, message: ComposedMessage) -> DeliveryReceipt:
        if not self.mail_sender.enabled:
            logger.warning("Mail sender disabled; inquiry accepted without email")
            return DeliveryReceipt(sent=False, error="Email transport not configured")

        try:
            receipt = await self.mail_sender.send(message)
        except Exception as e:
            error = MailDispatchError(str(e))
            logger.exception(f"Mail sender raised {type(e).__name__}; inquiry accepted without email")
            return DeliveryReceipt.failed(error)

        if not receipt.sent:
            logger.warning(f"Email dispatch failed: {receipt.error}")
        return receipt
