"""
Async HTTP client for the clients API.

Amounts are normalized right before a request body is serialized, overriding whatever
the caller passed, and again on every client record that comes back.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

import httpx
from pydantic_core import to_jsonable_python

from app.core.config import settings
from app.core.money import normalize_amount
from app.sdk.forms import ClientEntryForm

logger = logging.getLogger(__name__)


class ClientsApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _outbound(data: dict[str, Any] | ClientEntryForm) -> dict[str, Any]:
    payload = data.to_payload() if isinstance(data, ClientEntryForm) else dict(data)
    payload.pop("id", None)
    payload.pop("_id", None)
    payload["quotation_amount"] = normalize_amount(payload.get("quotation_amount"))
    return to_jsonable_python(payload)


def _inbound(record: dict[str, Any]) -> dict[str, Any]:
    record = dict(record)
    record["quotation_amount"] = normalize_amount(record.get("quotation_amount"))
    return record


class ClientsApiClient:
    """
    Usage:
        async with ClientsApiClient() as api:
            client = await api.add_client(ClientEntryForm(company_name="Acme", ...))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "ClientsApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = await self._http.request(method, path, **kwargs)
        if resp.status_code >= 400:
            try:
                message = resp.json().get("message") or resp.text
            except ValueError:
                message = resp.text
            logger.error("API %s %s failed: %s %s", method, path, resp.status_code, message)
            raise ClientsApiError(resp.status_code, str(message))
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def list_clients(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/clients/")
        return [_inbound(c) for c in data]

    async def get_client(self, client_id: UUID | str) -> dict[str, Any]:
        return _inbound(await self._request("GET", f"/clients/{client_id}"))

    async def add_client(self, data: dict[str, Any] | ClientEntryForm) -> dict[str, Any]:
        payload = _outbound(data)
        logger.debug("Adding client with quotation_amount=%s", payload["quotation_amount"])
        return _inbound(await self._request("POST", "/clients/", json=payload))

    async def update_client(self, client_id: UUID | str, data: dict[str, Any] | ClientEntryForm) -> dict[str, Any]:
        payload = _outbound(data)
        logger.debug("Updating client %s with quotation_amount=%s", client_id, payload["quotation_amount"])
        return _inbound(await self._request("PUT", f"/clients/{client_id}", json=payload))

    async def delete_client(self, client_id: UUID | str) -> None:
        await self._request("DELETE", f"/clients/{client_id}")

    async def end_subscription(self, client_id: UUID | str) -> dict[str, Any]:
        return _inbound(await self._request("POST", f"/clients/{client_id}/end-subscription"))

    async def record_payment(self, client_id: UUID | str, payment_date: Optional[str] = None) -> dict[str, Any]:
        body = {"payment_date": payment_date} if payment_date else None
        return _inbound(await self._request("POST", f"/clients/{client_id}/record-payment", json=body))

    async def upload_quotation(self, filename: str, content: bytes, content_type: str = "application/pdf") -> str:
        """Upload a quotation file; returns the stored path to put in quotation_file."""
        data = await self._request("POST", "/uploads/quotations", files={"file": (filename, content, content_type)})
        return data["path"]
