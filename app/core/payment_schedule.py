"""Shared payment schedule helpers: clients are billed monthly on payment_due_day."""
from datetime import date
from calendar import monthrange

from app.models.enums import SubscriptionStatus


def days_in_month(year: int, month: int) -> int:
    return monthrange(year, month)[1]


def add_months(year: int, month: int, months: int) -> tuple[int, int]:
    """Return (year, month) shifted by months."""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def due_date_in_month(due_day: int, year: int, month: int, clamp: bool = True) -> date | None:
    """
    Due date for due_day in the given month.
    clamp=True moves days past the month end to the last day (31 -> Feb 28);
    clamp=False returns None instead, as the calendar grid does.
    """
    last = days_in_month(year, month)
    if due_day > last:
        if not clamp:
            return None
        due_day = last
    return date(year, month, due_day)


def next_due_date(due_day: int, today: date) -> date:
    """Next due date on or after today: this month if the day has not passed, else next month."""
    if due_day >= today.day:
        return due_date_in_month(due_day, today.year, today.month)
    y, m = add_months(today.year, today.month, 1)
    return due_date_in_month(due_day, y, m)


def days_until_due(due_day: int, today: date) -> int:
    return (next_due_date(due_day, today) - today).days


def current_cycle_due_date(due_day: int, today: date) -> date:
    """This month's due date, clamped to the month length."""
    return due_date_in_month(due_day, today.year, today.month)


def is_active(client) -> bool:
    return client.subscription_status == SubscriptionStatus.active.value and bool(client.payment_due_day)


def is_overdue(client, today: date) -> bool:
    """
    Active client whose due date this month has passed with no payment recorded on or after it.
    """
    if not is_active(client):
        return False
    due = current_cycle_due_date(client.payment_due_day, today)
    if due >= today:
        return False
    last_paid = client.last_payment_date
    return last_paid is None or last_paid < due


def is_due_within(client, today: date, window_days: int) -> bool:
    if not is_active(client):
        return False
    return 0 <= days_until_due(client.payment_due_day, today) <= window_days


def upcoming_sort_key(client, today: date) -> tuple[int, int]:
    """
    Ordering for the upcoming payments table: days not yet passed this month first
    (by day), then days that roll into next month (by day).
    """
    day = client.payment_due_day or 0
    return (0 if day >= today.day else 1, day)
