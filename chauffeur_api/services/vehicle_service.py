import json
import time
from pathlib import Path
from typing import List, Optional

import aiofiles
from pydantic import TypeAdapter, ValidationError

from chauffeur_api.core.cache import CacheEntry, Clock
from chauffeur_api.core.logger import get_logger
from chauffeur_api.models.vehicle import Vehicle

logger = get_logger(__name__)

_VEHICLE_LIST = TypeAdapter(List[Vehicle])


class VehicleCatalog:
    """
    Static vehicle list read from a JSON file and kept for ``ttl`` seconds.

    A missing or broken file is logged and served as an empty catalog until
    the next refresh; callers never see the exception.
    """

    def __init__(self, path: Path, ttl: float = 3600.0, clock: Clock = time.monotonic):
        self.path = Path(path)
        self.ttl = ttl
        self._clock = clock
        self._entry: Optional[CacheEntry[List[Vehicle]]] = None

    @property
    def is_loaded(self) -> bool:
        return self._entry is not None and bool(self._entry.value)

    async def get_vehicles(self) -> List[Vehicle]:
        now = self._clock()
        if self._entry is None or self._entry.is_stale(now, self.ttl):
            self._entry = CacheEntry(value=await self._load(), cached_at=now)
        return list(self._entry.value)

    async def find_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        for vehicle in await self.get_vehicles():
            if vehicle.id == vehicle_id:
                return vehicle
        return None

    async def _load(self) -> List[Vehicle]:
        logger.info(f"Loading vehicle data from {self.path}")
        try:
            async with aiofiles.open(self.path, mode="r", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            logger.error(f"Error loading vehicle data from {self.path}: {e}")
            return []

        try:
            vehicles = _VEHICLE_LIST.validate_python(json.loads(content))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Error parsing vehicle data from {self.path}: {e}")
            return []

        logger.info(f"Loaded {len(vehicles)} vehicles")
        return vehicles
