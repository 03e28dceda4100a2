from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from chauffeur_api.core.config import Settings, get_settings
from chauffeur_api.core.dependencies import get_mail_sender, get_vehicle_catalog
from chauffeur_api.models.response import HealthResponse
from chauffeur_api.services.email_service import SmtpMailSender
from chauffeur_api.services.vehicle_service import VehicleCatalog

health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings),
    catalog: VehicleCatalog = Depends(get_vehicle_catalog),
    mail_sender: SmtpMailSender = Depends(get_mail_sender),
):
    await catalog.get_vehicles()
    return HealthResponse(
        timestamp=datetime.now(timezone.utc),
        vehicles_loaded=catalog.is_loaded,
        environment=settings.ENVIRONMENT,
        email_enabled=mail_sender.enabled,
    )
