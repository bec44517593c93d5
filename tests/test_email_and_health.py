"""Email delivery, the health endpoint and CORS preflight handling."""

import smtplib

import pytest

from app.infrastructure.external_services.email_service import EmailService
from app.domain.value_objects.money import Money
from app.tasks import send_email_task


def test_send_email_without_smtp_host_is_skipped(settings):
    service = EmailService(settings)
    assert service.smtp_host is None
    assert service.send_email("user@example.com", "Hello", "<p>Hi</p>") is True


def test_send_email_reports_smtp_failure(settings, monkeypatch):
    service = EmailService(settings)
    service.smtp_host = "smtp.example.com"

    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "unavailable")

    monkeypatch.setattr(smtplib, "SMTP", refuse)

    assert service.send_email("user@example.com", "Hello", "<p>Hi</p>") is False


def test_queue_email_swallows_broker_errors(settings, monkeypatch):
    def broker_down(*args, **kwargs):
        raise ConnectionError("broker unavailable")

    monkeypatch.setattr(send_email_task, "delay", broker_down)

    EmailService(settings).send_verification_email("user@example.com", "a" * 64)


def test_queue_email_runs_task_when_eager(settings, monkeypatch):
    delivered = []
    monkeypatch.setattr(
        EmailService, "send_email",
        lambda self, to, subject, html, text=None: delivered.append((to, subject)) or True,
    )

    EmailService(settings).send_payment_failed_email("user@example.com", "Ada", Money.from_cents(2999, "usd"))

    assert delivered == [("user@example.com", "Payment Failed")]


@pytest.mark.parametrize("url, expected", [
    ("verification_url", "http://localhost:3000/api/auth/verify?token=abc"),
    ("reset_url", "http://localhost:3000/reset-password?token=abc"),
])
def test_links_point_at_frontend(settings, url, expected):
    assert getattr(EmailService(settings), url)("abc") == expected


def test_health_reports_database(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["database"] == "healthy"
    assert body["status"] == "healthy"
    assert body["redis"] in ("healthy", "unhealthy")


def test_root(client):
    assert client.get("/").json()["message"] == "Subscription API"


def test_preflight_is_answered_for_any_path(client):
    response = client.options("/api/subscriptions/checkout", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]
    assert "Authorization" in response.headers["access-control-allow-headers"]


def test_preflight_echoes_request_origin(client, monkeypatch):
    monkeypatch.setattr("app.main.settings.ALLOWED_ORIGINS", ["http://localhost:3000"])

    response = client.options("/api/auth/login", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_preflight_without_origin_omits_allow_origin(client, monkeypatch):
    monkeypatch.setattr("app.main.settings.ALLOWED_ORIGINS", ["http://localhost:3000"])

    response = client.options("/api/auth/login")

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
    assert "POST" in response.headers["access-control-allow-methods"]
