from fastapi import APIRouter, Depends, Request
from chauffeur_api.core.dependencies import get_inquiry_pipeline
from chauffeur_api.core.logger import get_logger
from chauffeur_api.core.rate_limit import inquiry_rate_limit, limiter, rate_limit_disabled
from chauffeur_api.models.inquiry_request import InquiryRequest
from chauffeur_api.models.response import ErrorResponse, InquiryData, InquiryResponse
from chauffeur_api.services.inquiry_service import InquiryPipeline

inquiry_router = APIRouter(prefix="/api", tags=["Inquiry"])
logger = get_logger(__name__)


@inquiry_router.post(
    "/inquiry",
    response_model=InquiryResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation or verification failure"},
        404: {"model": ErrorResponse, "description": "Unknown vehicle"},
        429: {"model": ErrorResponse, "description": "Rate limited"},
    },
)
@limiter.limit(inquiry_rate_limit, exempt_when=rate_limit_disabled)
async def submit_inquiry(
    request: Request,
    payload: InquiryRequest,
    pipeline: InquiryPipeline = Depends(get_inquiry_pipeline),
):
    """
    Validate an inquiry, check the reCAPTCHA token and email the operator.
    A failed email does not fail the request; see ``emailSent``.
    """
    logger.info(f"Processing inquiry for vehicleId={payload.vehicle_id}")
    result = await pipeline.submit_inquiry(payload)
    return InquiryResponse(
        email_sent=result.email_sent,
        data=InquiryData(vehicle=result.vehicle, inquiry_date=result.submitted_at),
    )
