from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.clients.schemas import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    RecordPaymentRequest,
)
from app.api.v1.clients.service import ClientService
from app.core.deps import get_db
from app.models.enums import ExportFormat

router = APIRouter()

EXPORT_MEDIA_TYPES = {
    ExportFormat.csv: "text/csv; charset=utf-8",
    ExportFormat.xlsx: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@router.get(
    "/",
    response_model=List[ClientResponse],
    status_code=status.HTTP_200_OK,
    summary="List clients",
    description="All clients, newest first.",
    tags=["clients"],
)
async def get_clients(db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    clients = await service.get_clients()
    return [ClientResponse.model_validate(c) for c in clients]


@router.post(
    "/",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
    description="Create a client. A missing or malformed quotation_amount is stored as 0.",
    tags=["clients"],
)
async def create_client(data: ClientCreate, db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    client = await service.create_client(data)
    return ClientResponse.model_validate(client)


@router.get(
    "/export",
    status_code=status.HTTP_200_OK,
    summary="Export clients with payments due",
    description="Download the clients due in a month as CSV (default) or Excel. Optionally limited to client_ids.",
    tags=["clients"],
)
async def export_due_clients(
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12); defaults to the current month"),
    year: Optional[int] = Query(None, ge=1970, le=9999, description="Year; defaults to the current year"),
    client_ids: Optional[List[UUID]] = Query(None, description="Only export these clients"),
    export_format: ExportFormat = Query(ExportFormat.csv, alias="format"),
    db: AsyncSession = Depends(get_db),
):
    today = date.today()
    month = month or today.month
    year = year or today.year
    service = ClientService(db)
    content = await service.export_due_clients(year, month, client_ids=client_ids, export_format=export_format)
    filename = f"payment_due_{month}_{year}.{export_format.value}"
    return Response(
        content=content,
        media_type=EXPORT_MEDIA_TYPES[export_format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    summary="Get client by ID",
    tags=["clients"],
)
async def get_client(client_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    client = await service.get_client_or_404(client_id)
    return ClientResponse.model_validate(client)


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    summary="Update client",
    description="Update the fields sent. quotation_amount is always written (0 when omitted).",
    tags=["clients"],
)
async def update_client(client_id: UUID, data: ClientUpdate, db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    client = await service.update_client(client_id, data)
    return ClientResponse.model_validate(client)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete client",
    tags=["clients"],
)
async def delete_client(client_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    await service.delete_client(client_id)


@router.post(
    "/{client_id}/end-subscription",
    response_model=ClientResponse,
    summary="End subscription",
    description="Mark the subscription as ended with today's date as the end date.",
    tags=["clients"],
)
async def end_subscription(client_id: UUID, db: AsyncSession = Depends(get_db)):
    service = ClientService(db)
    client = await service.end_subscription(client_id)
    return ClientResponse.model_validate(client)


@router.post(
    "/{client_id}/record-payment",
    response_model=ClientResponse,
    summary="Record payment",
    description="Set the last payment date to the given date, or today.",
    tags=["clients"],
)
async def record_payment(
    client_id: UUID,
    data: Optional[RecordPaymentRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    service = ClientService(db)
    client = await service.record_payment(client_id, data.payment_date if data else None)
    return ClientResponse.model_validate(client)
