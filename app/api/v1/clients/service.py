import csv
import io
import logging
from datetime import date
from typing import List, Optional, Sequence
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.clients.schemas import ClientCreate, ClientUpdate
from app.core.exceptions import AppException
from app.core.money import normalize_amount
from app.core.payment_schedule import due_date_in_month, is_active
from app.models.client import Client
from app.models.enums import ExportFormat, SubscriptionStatus

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["Company", "Contact Name", "Email", "Phone", "Due Date", "Amount Due"]
# Columns an update may not clear; an explicit null leaves them unchanged
REQUIRED_FIELDS = (
    "company_name",
    "contact_name",
    "phone",
    "subscription_date",
    "subscription_status",
    "payment_due_day",
)


class ClientService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_clients(self) -> List[Client]:
        """All clients, newest first."""
        result = await self.db.execute(select(Client).order_by(Client.created_at.desc()))
        return list(result.scalars().all())

    async def get_client_by_id(self, client_id: UUID) -> Optional[Client]:
        return await self.db.get(Client, client_id)

    async def get_client_or_404(self, client_id: UUID) -> Client:
        client = await self.get_client_by_id(client_id)
        if not client:
            AppException().raise_404("Client not found")
        return client

    async def create_client(self, data: ClientCreate) -> Client:
        values = data.model_dump()
        values["subscription_status"] = data.subscription_status.value
        if values.get("payment_due_month") is None:
            values.pop("payment_due_month")
        client = Client(**values)
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)
        logger.info("Client created: id=%s quotation_amount=%s", client.id, client.quotation_amount)
        self._check_saved_amount(client, data.quotation_amount)
        return client

    async def update_client(self, client_id: UUID, data: ClientUpdate) -> Client:
        client = await self.get_client_or_404(client_id)
        values = data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if values.get(field, ...) is None:
                values.pop(field)
        # quotation_amount is always written: an update without it stores 0
        values["quotation_amount"] = data.quotation_amount
        if data.subscription_status is not None:
            values["subscription_status"] = data.subscription_status.value
        for field, value in values.items():
            setattr(client, field, value)
        self.db.add(client)
        await self.db.commit()
        await self.db.refresh(client)
        logger.info("Client updated: id=%s quotation_amount=%s", client.id, client.quotation_amount)
        self._check_saved_amount(client, data.quotation_amount)
        return client

    async def delete_client(self, client_id: UUID) -> None:
        client = await self.get_client_or_404(client_id)
        await self.db.delete(client)
        await self.db.commit()
        logger.info("Client deleted: id=%s", client_id)

    async def end_subscription(self, client_id: UUID, today: Optional[date] = None) -> Client:
        client = await self.get_client_or_404(client_id)
        client.subscription_status = SubscriptionStatus.ended.value
        client.subscription_end_date = today or date.today()
        await self.db.commit()
        await self.db.refresh(client)
        logger.info("Subscription ended: id=%s end_date=%s", client.id, client.subscription_end_date)
        return client

    async def record_payment(self, client_id: UUID, payment_date: Optional[date] = None) -> Client:
        client = await self.get_client_or_404(client_id)
        client.last_payment_date = payment_date or date.today()
        await self.db.commit()
        await self.db.refresh(client)
        logger.info("Payment recorded: id=%s date=%s", client.id, client.last_payment_date)
        return client

    async def get_clients_due_in_month(
        self,
        year: int,
        month: int,
        client_ids: Optional[Sequence[UUID]] = None,
    ) -> List[Client]:
        """
        Active clients billed in the month whose due day exists in it, ordered by due
        day then company. A client without a payment_due_month is billed every month.
        """
        query = select(Client).where(
            Client.subscription_status == SubscriptionStatus.active.value,
            or_(Client.payment_due_month.is_(None), Client.payment_due_month == month),
        )
        if client_ids:
            query = query.where(Client.id.in_(list(client_ids)))
        result = await self.db.execute(query)
        clients = [
            c for c in result.scalars().all()
            if is_active(c) and due_date_in_month(c.payment_due_day, year, month, clamp=False) is not None
        ]
        clients.sort(key=lambda c: (c.payment_due_day, c.company_name.lower()))
        return clients

    async def export_due_clients(
        self,
        year: int,
        month: int,
        client_ids: Optional[Sequence[UUID]] = None,
        export_format: ExportFormat = ExportFormat.csv,
    ) -> bytes:
        """Export the clients due in a month as CSV or Excel (.xlsx)."""
        clients = await self.get_clients_due_in_month(year, month, client_ids)
        rows = [
            [
                c.company_name,
                c.contact_name,
                c.email or "",
                c.phone,
                f"{c.payment_due_day}/{month}/{year}",
                f"{normalize_amount(c.quotation_amount):.2f}",
            ]
            for c in clients
        ]
        logger.info("Exporting %s due clients for %s/%s as %s", len(rows), month, year, export_format.value)
        if export_format == ExportFormat.xlsx:
            return self._rows_to_xlsx(rows, title=f"Due {month}-{year}")
        return self._rows_to_csv(rows)

    @staticmethod
    def _rows_to_csv(rows: List[List[str]]) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        buffer.write(",".join(EXPORT_HEADERS) + "\n")
        writer.writerows(rows)
        return buffer.getvalue().encode("utf-8")

    @staticmethod
    def _rows_to_xlsx(rows: List[List[str]], title: str) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for col, header in enumerate(EXPORT_HEADERS, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = Font(bold=True)
            cell.alignment = Alignment(horizontal="center", wrap_text=True)
        for row_idx, row in enumerate(rows, start=2):
            for col, value in enumerate(row[:-1], start=1):
                ws.cell(row=row_idx, column=col, value=value)
            amount_cell = ws.cell(row=row_idx, column=len(row), value=float(row[-1]))
            amount_cell.number_format = "#,##0.00"
        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)
        return buffer.getvalue()

    @staticmethod
    def _check_saved_amount(client: Client, expected: float) -> None:
        """Warn when the amount read back from the database differs from the one written."""
        saved = client.quotation_amount
        if saved != expected:
            logger.warning(
                "Saved quotation_amount does not match the value written: client=%s expected=%s got=%s",
                client.id, expected, saved,
            )
