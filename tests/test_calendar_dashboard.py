"""
Tests for the payment calendar and the dashboard.
"""
from datetime import date

import pytest

from app.api.v1.calendar.service import CalendarService
from app.api.v1.dashboard.service import DashboardService


@pytest.fixture
def seeded(add_clients, make_client):
    async def _seed():
        return await add_clients(
            make_client(company_name="Zeta Ltd", payment_due_day=15, quotation_amount=500),
            make_client(company_name="Acme Corp", payment_due_day=15, quotation_amount=1500),
            make_client(company_name="Month End", payment_due_day=31, quotation_amount=250),
            make_client(company_name="Early Bird", payment_due_day=2, quotation_amount=0),
            make_client(company_name="Gone", payment_due_day=12, quotation_amount=900, subscription_status="ended"),
        )

    return _seed


class TestMonthCalendarEndpoint:
    def test_april_skips_day_31(self, client, client_payload):
        client.post("/api/v1/clients/", json=client_payload(company_name="Zeta Ltd", quotation_amount=500))
        client.post("/api/v1/clients/", json=client_payload(company_name="Acme Corp", quotation_amount="1500"))
        client.post("/api/v1/clients/", json=client_payload(company_name="Month End", payment_due_day=31))

        resp = client.get("/api/v1/calendar/month", params={"year": 2026, "month": 4})
        assert resp.status_code == 200
        body = resp.json()
        assert body["days_in_month"] == 30
        # 1 April 2026 is a Wednesday; the grid starts on Sunday
        assert body["first_weekday"] == 3
        assert body["total_clients"] == 2
        assert body["total_due"] == 2000.0
        assert len(body["days"]) == 1
        day = body["days"][0]
        assert day["day"] == 15
        assert day["date"] == "2026-04-15"
        assert [e["company_name"] for e in day["events"]] == ["Acme Corp", "Zeta Ltd"]

    def test_month_with_day_31(self, client, client_payload):
        client.post("/api/v1/clients/", json=client_payload(company_name="Month End", payment_due_day=31))
        body = client.get("/api/v1/calendar/month", params={"year": 2026, "month": 5}).json()
        assert [d["day"] for d in body["days"]] == [31]

    def test_invalid_month(self, client):
        assert client.get("/api/v1/calendar/month", params={"year": 2026, "month": 13}).status_code == 422

    def test_upcoming_endpoint(self, client):
        resp = client.get("/api/v1/calendar/upcoming", params={"days": 7})
        assert resp.status_code == 200
        assert resp.json() == {"window_days": 7, "payments": []}


class TestCalendarService:
    pytestmark = pytest.mark.asyncio

    async def test_upcoming_within_window(self, session_maker, seeded):
        await seeded()
        async with session_maker() as session:
            result = await CalendarService(session).get_upcoming_payments(
                window_days=7, limit=5, today=date(2026, 4, 10)
            )
        assert [p.company_name for p in result.payments] == ["Acme Corp", "Zeta Ltd"]
        first = result.payments[0]
        assert first.due_date == date(2026, 4, 15)
        assert first.days_until_due == 5
        assert first.amount == 1500.0

    async def test_upcoming_clamps_short_months(self, session_maker, seeded):
        await seeded()
        async with session_maker() as session:
            result = await CalendarService(session).get_upcoming_payments(
                window_days=3, limit=5, today=date(2026, 4, 28)
            )
        # Day 31 falls on 30 April; day 2 on 2 May is four days out
        assert [(p.company_name, p.due_date) for p in result.payments] == [("Month End", date(2026, 4, 30))]

    async def test_limit(self, session_maker, seeded):
        await seeded()
        async with session_maker() as session:
            result = await CalendarService(session).get_upcoming_payments(
                window_days=31, limit=2, today=date(2026, 4, 10)
            )
        assert len(result.payments) == 2


class TestDashboardService:
    pytestmark = pytest.mark.asyncio

    async def test_dashboard_data(self, session_maker, seeded):
        await seeded()
        async with session_maker() as session:
            data = await DashboardService(session).get_dashboard_data(today=date(2026, 4, 20))

        stats = data.summary_stats
        assert stats.total_clients == 5
        assert stats.active_clients == 4
        assert stats.ended_clients == 1
        assert stats.total_due == 2250.0
        assert stats.clients_with_payments_due == 3
        assert stats.average_payment == 750.0
        # Due 2nd and 15th have passed with no payment recorded
        assert stats.overdue_count == 3

        assert [(p.x, p.y) for p in data.chart_data] == [
            ("Acme Corp", 1500.0),
            ("Zeta Ltd", 500.0),
            ("Month End", 250.0),
        ]

        upcoming = data.upcoming_payments
        assert [p.company_name for p in upcoming][0] == "Month End"
        assert upcoming[0].due_date == date(2026, 4, 30)
        assert [p.payment_due_day for p in upcoming] == [31, 2, 15, 15]
        assert upcoming[1].overdue is True

    async def test_upcoming_payments_limit(self, session_maker, seeded):
        await seeded()
        async with session_maker() as session:
            upcoming = await DashboardService(session).get_upcoming_payments(limit=2, today=date(2026, 4, 1))
        assert [p.payment_due_day for p in upcoming] == [2, 15]


class TestDashboardSummary:
    def test_summary_of_no_clients(self):
        stats = DashboardService.summarize([], date(2026, 4, 1))
        assert stats.total_clients == 0
        assert stats.total_due == 0.0
        assert stats.average_payment == 0.0


class TestDashboardEndpoints:
    def test_dashboard(self, client, client_payload):
        client.post("/api/v1/clients/", json=client_payload(quotation_amount="not a number"))
        resp = client.get("/api/v1/dashboard/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["summary_stats"]["total_clients"] == 1
        assert body["summary_stats"]["total_due"] == 0.0
        assert body["chart_data"] == []
        assert len(body["upcoming_payments"]) == 1

    def test_upcoming_payments(self, client, client_payload):
        for day in (1, 10, 20):
            client.post("/api/v1/clients/", json=client_payload(payment_due_day=day))
        resp = client.get("/api/v1/dashboard/upcoming-payments", params={"limit": 2})
        assert resp.status_code == 200
        assert len(resp.json()["upcoming_payments"]) == 2
