def test_health_endpoint(client):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert "features" in data
    assert "integrations" in data
    assert set(data["features"]) == {"notifications_enabled", "autoreply_enabled", "rate_limit_enabled"}


def test_health_reports_email_configuration_without_secrets(client, monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "resend_api_key", "re_secret_value")
    response = client.get("/health")

    assert response.json()["integrations"]["email_configured"] is True
    assert "re_secret_value" not in response.text


def test_ready_endpoint(client):
    """Ready check verifies database connectivity."""
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"ok": True, "database": "connected"}
