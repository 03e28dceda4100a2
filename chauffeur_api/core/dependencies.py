"""Process-wide service instances, built once from settings.

Routes receive these through ``Depends`` so tests can swap them with
``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from chauffeur_api.core.cache import TTLCache
from chauffeur_api.core.config import Settings, get_settings
from chauffeur_api.services.email_service import SmtpMailSender
from chauffeur_api.services.inquiry_service import InquiryPipeline
from chauffeur_api.services.recaptcha_service import RecaptchaVerifier
from chauffeur_api.services.vehicle_service import VehicleCatalog


@lru_cache
def get_vehicle_catalog() -> VehicleCatalog:
    settings = get_settings()
    return VehicleCatalog(settings.VEHICLES_FILE, ttl=settings.VEHICLE_CACHE_TTL)


@lru_cache
def get_verifier() -> RecaptchaVerifier:
    settings = get_settings()
    return RecaptchaVerifier(
        secret=settings.RECAPTCHA_SECRET,
        cache=TTLCache(ttl=settings.VERIFICATION_CACHE_TTL, maxsize=settings.VERIFICATION_CACHE_SIZE),
        score_threshold=settings.RECAPTCHA_SCORE_THRESHOLD,
        verify_url=settings.RECAPTCHA_VERIFY_URL,
        timeout=settings.RECAPTCHA_TIMEOUT,
        allow_test_token=settings.test_token_allowed,
        test_token=settings.RECAPTCHA_TEST_TOKEN,
    )


@lru_cache
def get_mail_sender() -> SmtpMailSender:
    settings = get_settings()
    return SmtpMailSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.EMAIL_USER,
        password=settings.EMAIL_PASS,
        recipient=settings.mail_recipient,
        sender_name=settings.EMAIL_FROM_NAME,
        timeout=settings.SMTP_TIMEOUT,
    )


def get_inquiry_pipeline(
    settings: Settings = Depends(get_settings),
    catalog: VehicleCatalog = Depends(get_vehicle_catalog),
    verifier: RecaptchaVerifier = Depends(get_verifier),
    mail_sender: SmtpMailSender = Depends(get_mail_sender),
) -> InquiryPipeline:
    return InquiryPipeline(
        catalog=catalog,
        verifier=verifier,
        mail_sender=mail_sender,
        require_verification=settings.verification_required,
        allow_past_dates=not settings.is_production(),
        expected_action=settings.RECAPTCHA_EXPECTED_ACTION,
    )
