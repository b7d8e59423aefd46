"""
Tests for payment reminders: the reminder pass, duplicate prevention, e-mail
delivery and the notifications API.
"""
import asyncio
import uuid
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select

from app.api.v1.notifications.service import as_naive_utc
from app.core import cron_runner
from app.core.config import settings
from app.core.email import send_email
from app.core.notification_service import reminder_message, scope_key_for_client_due
from app.cron.payment_reminders import ReminderRunResult, check_and_send_payment_reminders
from app.models.payment_reminder_log import PaymentReminderLog

TODAY = date(2026, 4, 14)


@pytest.fixture
def seeded(add_clients, make_client):
    async def _seed():
        return await add_clients(
            make_client(company_name="Acme Corp", payment_due_day=15, quotation_amount=1234.5),
            make_client(company_name="Zeta Ltd", payment_due_day=15, quotation_amount="abc"),
            make_client(company_name="Early Bird", payment_due_day=2, quotation_amount=80),
            make_client(company_name="Paid Up", payment_due_day=2, last_payment_date=date(2026, 4, 3)),
            make_client(company_name="Month End", payment_due_day=31),
            make_client(company_name="Gone", payment_due_day=15, subscription_status="ended"),
        )

    return _seed


async def _logs(session_maker) -> list[PaymentReminderLog]:
    async with session_maker() as session:
        result = await session.execute(select(PaymentReminderLog).order_by(PaymentReminderLog.title))
        return list(result.scalars().all())


class TestReminderMessages:
    def test_scope_key(self):
        client_id = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert scope_key_for_client_due(client_id, date(2026, 4, 15)) == (
            "client:12345678-1234-5678-1234-567812345678:due:2026-04-15"
        )

    def test_due_tomorrow(self):
        title, body = reminder_message("due_tomorrow", "Acme Corp", 1234.5, date(2026, 4, 15))
        assert title == "Payment Due Tomorrow: Acme Corp"
        assert body == "Payment of $1,234.50 for Acme Corp is due on 2026-04-15."

    def test_overdue_with_malformed_amount(self):
        title, body = reminder_message("overdue", "Acme Corp", float("nan"), date(2026, 4, 2))
        assert title == "Payment Overdue: Acme Corp"
        assert body == "Payment of $0.00 for Acme Corp is overdue. Please check the client details."


class TestReminderRun:
    pytestmark = pytest.mark.asyncio

    async def test_due_tomorrow_and_overdue(self, session_maker, seeded):
        await seeded()
        outcome = await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        assert outcome.due_tomorrow == 2
        assert outcome.overdue == 1
        assert outcome.errors == 0

        logs = await _logs(session_maker)
        assert [log.title for log in logs] == [
            "Payment Due Tomorrow: Acme Corp",
            "Payment Due Tomorrow: Zeta Ltd",
            "Payment Overdue: Early Bird",
        ]
        assert logs[1].body == "Payment of $0.00 for Zeta Ltd is due on 2026-04-15."
        assert logs[2].scope_key.endswith(":due:2026-04-02")
        assert not any(log.emailed for log in logs)

    async def test_second_run_sends_nothing(self, session_maker, seeded):
        await seeded()
        await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        outcome = await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        assert (outcome.due_tomorrow, outcome.overdue, outcome.errors) == (0, 0, 0)
        async with session_maker() as session:
            count = await session.scalar(select(func.count()).select_from(PaymentReminderLog))
        assert count == 3

    async def test_emails_when_configured(self, session_maker, seeded):
        await seeded()
        send = AsyncMock(return_value=True)
        with patch("app.core.notification_service.is_email_configured", return_value=True), \
                patch("app.core.notification_service.send_payment_reminder_email", send):
            await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        assert send.await_count == 3
        assert send.await_args_list[0].args[0].startswith("Payment ")
        assert all(log.emailed for log in await _logs(session_maker))

    async def test_failed_email_still_logged(self, session_maker, seeded):
        await seeded()
        with patch("app.core.notification_service.is_email_configured", return_value=True), \
                patch("app.core.notification_service.send_payment_reminder_email", AsyncMock(return_value=False)):
            outcome = await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        assert outcome.due_tomorrow == 2
        assert not any(log.emailed for log in await _logs(session_maker))

    async def test_errors_are_counted_per_client(self, session_maker, seeded):
        await seeded()
        with patch(
            "app.cron.payment_reminders.send_payment_reminder",
            AsyncMock(side_effect=RuntimeError("smtp down")),
        ):
            outcome = await check_and_send_payment_reminders(session_maker=session_maker, today=TODAY)
        assert outcome.errors == 3
        assert outcome.due_tomorrow == 0
        assert await _logs(session_maker) == []


class TestCronLoop:
    pytestmark = pytest.mark.asyncio

    async def test_runs_then_stops_on_cancel(self):
        check = AsyncMock(return_value=ReminderRunResult())
        sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])
        with patch.object(cron_runner, "check_and_send_payment_reminders", check), \
                patch.object(cron_runner.asyncio, "sleep", sleep):
            await cron_runner.run_payment_reminder_cron_loop()
        check.assert_awaited_once()
        assert sleep.await_args_list[1].args[0] == max(60.0, settings.CRON_PAYMENT_REMINDER_INTERVAL_HOURS * 3600)


class TestSendEmail:
    pytestmark = pytest.mark.asyncio

    async def test_starttls(self, monkeypatch):
        monkeypatch.setattr(settings, "MAIL_SERVER", "smtp.test")
        monkeypatch.setattr(settings, "MAIL_PORT", 587)
        send = AsyncMock()
        with patch("app.core.email.aiosmtplib.send", send):
            assert await send_email("admin@test", "Subject", "Body") is True
        assert send.await_args.kwargs["start_tls"] is True
        assert send.await_args.kwargs["hostname"] == "smtp.test"

    async def test_implicit_tls(self, monkeypatch):
        monkeypatch.setattr(settings, "MAIL_SERVER", "smtp.test")
        monkeypatch.setattr(settings, "MAIL_PORT", 465)
        send = AsyncMock()
        with patch("app.core.email.aiosmtplib.send", send):
            assert await send_email("admin@test", "Subject", "Body", html_body="<p>Body</p>") is True
        assert send.await_args.kwargs["use_tls"] is True
        message = send.await_args.args[0]
        assert [part.get_content_type() for part in message.get_payload()] == ["text/plain", "text/html"]

    async def test_failure_returns_false(self, monkeypatch):
        monkeypatch.setattr(settings, "MAIL_SERVER", "smtp.test")
        with patch("app.core.email.aiosmtplib.send", AsyncMock(side_effect=OSError("refused"))):
            assert await send_email("admin@test", "Subject", "Body") is False


class TestNotificationsApi:
    def test_run_and_list(self, client, client_payload):
        tomorrow = date.today() + timedelta(days=1)
        created = client.post("/api/v1/clients/", json=client_payload(payment_due_day=tomorrow.day)).json()
        # Paid today, so nothing is overdue even when tomorrow is in the next month
        client.post(f"/api/v1/clients/{created['id']}/record-payment")

        resp = client.post("/api/v1/notifications/run")
        assert resp.status_code == 200
        assert resp.json() == {"due_tomorrow_count": 1, "overdue_count": 0, "error_count": 0}

        resp = client.get("/api/v1/notifications/")
        assert resp.status_code == 200
        reminders = resp.json()["reminders"]
        assert len(reminders) == 1
        assert reminders[0]["title"] == "Payment Due Tomorrow: Acme Corp"
        assert reminders[0]["client_id"] == created["id"]
        assert reminders[0]["emailed"] is False

        again = client.post("/api/v1/notifications/run").json()
        assert again["due_tomorrow_count"] == 0

    def test_list_since(self, client):
        resp = client.get("/api/v1/notifications/", params={"since": "2100-01-01T00:00:00"})
        assert resp.status_code == 200
        assert resp.json() == {"reminders": []}

    def test_list_since_with_utc_offset(self, client, client_payload):
        tomorrow = date.today() + timedelta(days=1)
        created = client.post("/api/v1/clients/", json=client_payload(payment_due_day=tomorrow.day)).json()
        client.post(f"/api/v1/clients/{created['id']}/record-payment")
        client.post("/api/v1/notifications/run")

        resp = client.get("/api/v1/notifications/", params={"since": "2000-01-01T00:00:00Z"})
        assert resp.status_code == 200
        assert len(resp.json()["reminders"]) == 1

        resp = client.get("/api/v1/notifications/", params={"since": "2100-01-01T00:00:00+02:00"})
        assert resp.status_code == 200
        assert resp.json() == {"reminders": []}


class TestAsNaiveUtc:
    def test_aware_value_converted_to_utc(self):
        moment = datetime(2026, 10, 19, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        assert as_naive_utc(moment) == datetime(2026, 10, 19, 10, 0)
        assert as_naive_utc(moment).tzinfo is None

    def test_naive_value_unchanged(self):
        moment = datetime(2026, 10, 19, 12, 0)
        assert as_naive_utc(moment) is moment
