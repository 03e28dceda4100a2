"""Pytest configuration and shared fixtures"""
import json
from datetime import date, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from chauffeur_api.core.cache import TTLCache
from chauffeur_api.core.config import PACKAGE_DIR, Settings, get_settings, settings
from chauffeur_api.core.dependencies import (
    get_mail_sender,
    get_vehicle_catalog,
    get_verifier,
)
from chauffeur_api.core.rate_limit import limiter
from chauffeur_api.main import app
from chauffeur_api.services.recaptcha_service import RecaptchaVerifier
from chauffeur_api.services.vehicle_service import VehicleCatalog
from fakes import FakeClock, FakeMailSender

VEHICLES = [
    {"id": 1, "name": "Rolls-Royce Phantom", "description": "The epitome of luxury.", "rate": 1500},
    {"id": 2, "name": "Bentley Mulsanne", "description": "British craftsmanship.", "rate": 1200},
]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def vehicles_file(tmp_path: Path) -> Path:
    path = tmp_path / "vehicles.json"
    path.write_text(json.dumps(VEHICLES), encoding="utf-8")
    return path


@pytest.fixture
def catalog(vehicles_file: Path) -> VehicleCatalog:
    return VehicleCatalog(vehicles_file, ttl=3600)


@pytest.fixture
def mail_sender() -> FakeMailSender:
    return FakeMailSender()


@pytest.fixture
def tomorrow() -> str:
    return (date.today() + timedelta(days=1)).isoformat()


@pytest.fixture
def valid_payload(tomorrow: str) -> dict:
    return {
        "vehicleId": 1,
        "purpose": "Airport transfer",
        "date": tomorrow,
        "email": "a@b.com",
        "description": "",
        "captchaToken": "TESTING_TOKEN",
    }


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ENVIRONMENT="test", RECAPTCHA_SECRET="test-secret")


@pytest.fixture
def client(test_settings: Settings, mail_sender: FakeMailSender, monkeypatch):
    """TestClient wired to the packaged catalog, test-token bypass and a fake mailer."""
    verifier = RecaptchaVerifier(
        secret=test_settings.RECAPTCHA_SECRET,
        cache=TTLCache(ttl=300),
        allow_test_token=True,
    )
    catalog = VehicleCatalog(PACKAGE_DIR / "data" / "vehicles.json")

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_vehicle_catalog] = lambda: catalog
    app.dependency_overrides[get_verifier] = lambda: verifier
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender
    # The limiter reads the module settings at request time
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 10)
    monkeypatch.setattr(settings, "RATE_LIMIT_WINDOW_SECONDS", 3600)
    limiter.reset()
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
