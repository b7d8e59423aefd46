from enum import Enum


class SubscriptionStatus(str, Enum):
    active = "active"
    ended = "ended"


class ReminderType(str, Enum):
    due_tomorrow = "due_tomorrow"
    overdue = "overdue"


class ExportFormat(str, Enum):
    csv = "csv"
    xlsx = "xlsx"
