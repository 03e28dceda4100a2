from chauffeur_api.core.config import settings
from chauffeur_api.core.dependencies import get_inquiry_pipeline, get_mail_sender
from chauffeur_api.main import app
from fakes import FakeMailSender


def test_health_reports_status(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body
    assert body["vehiclesLoaded"] is True
    assert body["environment"] == "test"
    assert body["emailEnabled"] is True
    assert response.headers["X-Request-ID"]


def test_list_vehicles(client):
    response = client.get("/api/vehicles")
    assert response.status_code == 200
    vehicles = response.json()
    assert [v["id"] for v in vehicles] == [1, 2, 3]
    assert vehicles[0] == {
        "id": 1,
        "name": "Rolls-Royce Phantom",
        "description": "The epitome of luxury and refinement, perfect for executive travel.",
        "rate": 1500,
    }
    assert all(type(v["rate"]) is int for v in vehicles)


def test_inquiry_with_testing_token_succeeds(client, valid_payload, mail_sender):
    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Inquiry received successfully"
    assert body["emailSent"] is True
    assert body["data"]["vehicle"] == "Rolls-Royce Phantom"
    assert body["data"]["inquiryDate"]
    assert len(mail_sender.sent) == 1


def test_inquiry_succeeds_when_email_fails(client, valid_payload):
    app.dependency_overrides[get_mail_sender] = lambda: FakeMailSender(raises=ConnectionError("smtp down"))

    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["emailSent"] is False


def test_invalid_email_is_400(client, valid_payload):
    valid_payload["email"] = "not-an-email"
    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Invalid email format"
    assert body["error"]["code"] == "invalid_email"


def test_missing_purpose_is_400(client, valid_payload):
    del valid_payload["purpose"]
    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Purpose is required"
    assert body["error"]["details"] == {"field": "purpose"}


def test_unknown_vehicle_is_404(client, valid_payload):
    valid_payload["vehicleId"] = 9999
    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "vehicle_not_found"


def test_missing_token_is_400(client, valid_payload):
    del valid_payload["captchaToken"]
    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "missing_token"


def test_verification_token_alias_accepted(client, valid_payload):
    valid_payload["verificationToken"] = valid_payload.pop("captchaToken")
    response = client.post("/api/inquiry", json=valid_payload)
    assert response.status_code == 200


def test_malformed_body_is_400(client):
    response = client.post("/api/inquiry", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_rate_limit_returns_429(client, valid_payload, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 2)

    responses = [client.post("/api/inquiry", json=valid_payload) for _ in range(3)]

    assert [r.status_code for r in responses] == [200, 200, 429]
    body = responses[-1].json()
    assert body["success"] is False
    assert body["message"] == "Too many requests, please try again later"
    assert body["error"]["code"] == "rate_limited"
    assert body["error"]["details"] == {"retryAfter": "60 minutes"}
    assert responses[-1].headers["X-Request-ID"]


def test_rate_limit_only_applies_to_inquiries(client, valid_payload, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 1)

    assert client.post("/api/inquiry", json=valid_payload).status_code == 200
    assert client.post("/api/inquiry", json=valid_payload).status_code == 429
    assert client.get("/api/vehicles").status_code == 200
    assert client.get("/health").status_code == 200


def test_zero_rate_limit_disables_limiting(client, valid_payload, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_MAX", 0)

    statuses = [client.post("/api/inquiry", json=valid_payload).status_code for _ in range(5)]

    assert statuses == [200] * 5


def test_unknown_route_is_404(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json()["message"] == "Route not found: /api/nope"


def test_unexpected_error_is_500_without_leaking_in_production(client, valid_payload, monkeypatch):
    class BrokenPipeline:
        async def submit_inquiry(self, raw):
            raise RuntimeError("database exploded")

    from chauffeur_api import main

    monkeypatch.setattr(main.settings, "ENVIRONMENT", "production")
    app.dependency_overrides[get_inquiry_pipeline] = lambda: BrokenPipeline()

    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 500
    body = response.json()
    assert body == {"success": False, "message": "Internal server error"}


def test_unexpected_error_includes_detail_outside_production(client, valid_payload, monkeypatch):
    class BrokenPipeline:
        async def submit_inquiry(self, raw):
            raise RuntimeError("database exploded")

    from chauffeur_api import main

    monkeypatch.setattr(main.settings, "ENVIRONMENT", "development")
    app.dependency_overrides[get_inquiry_pipeline] = lambda: BrokenPipeline()

    response = client.post("/api/inquiry", json=valid_payload)

    assert response.status_code == 500
    assert response.json()["error"]["message"] == "database exploded"


def test_unexpected_error_still_carries_request_id(client, valid_payload):
    class BrokenPipeline:
        async def submit_inquiry(self, raw):
            raise RuntimeError("database exploded")

    app.dependency_overrides[get_inquiry_pipeline] = lambda: BrokenPipeline()

    generated = client.post("/api/inquiry", json=valid_payload)
    forwarded = client.post("/api/inquiry", json=valid_payload, headers={"X-Request-ID": "req-123"})

    assert generated.status_code == 500
    assert generated.headers["X-Request-ID"]
    assert forwarded.status_code == 500
    assert forwarded.headers["X-Request-ID"] == "req-123"
