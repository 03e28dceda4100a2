from typing import List
from fastapi import APIRouter, Depends
from chauffeur_api.core.dependencies import get_vehicle_catalog
from chauffeur_api.models.vehicle import Vehicle
from chauffeur_api.services.vehicle_service import VehicleCatalog

vehicle_router = APIRouter(prefix="/api", tags=["Vehicle"])


@vehicle_router.get("/vehicles", response_model=List[Vehicle])
async def list_vehicles(catalog: VehicleCatalog = Depends(get_vehicle_catalog)):
    """
    Returns the vehicle catalog.
    """
    return await catalog.get_vehicles()
