"""httpx-backed Transport for the catalog HTTP API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from svcatalog.domain.errors import ConflictError, InvalidStateError, NoSuchServiceError
from svcatalog.domain.model import Catalog, Filter, Page, Service, Version
from svcatalog.interfaces.transport import Transport

from .schemas import CatalogModel, ServiceModel, VersionModel

logger = logging.getLogger(__name__)


class HttpTransport(Transport):
    """Talk to a catalog server through an ``httpx.Client``.

    The client should carry the server's base URL. Error responses are turned
    back into the domain errors the server raised; any other non-2xx status
    raises ``httpx.HTTPStatusError``.
    """

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def save_service(self, service: Service) -> Service:
        body = ServiceModel.from_domain(service).model_dump(
            mode="json", exclude={"updated"}
        )
        response = self.client.put("/services", json=body)
        _raise_for_status(response, service.id)
        return ServiceModel.model_validate(response.json()).to_domain()

    def save_version(self, version: Version) -> Version:
        body = VersionModel.from_domain(version).model_dump(
            mode="json", exclude={"created"}
        )
        response = self.client.put("/versions", json=body)
        _raise_for_status(response, version.service_id)
        return VersionModel.model_validate(response.json()).to_domain()

    def list_services(self, filter_: Filter, page: Page) -> Catalog:
        params: dict[str, Any] = {
            "offset": page.offset,
            "limit": page.limit,
            "order": page.order_by,
        }
        if filter_.name_contains:
            params["name"] = filter_.name_contains
        if filter_.desc_contains:
            params["desc"] = filter_.desc_contains
        if filter_.service_id:
            params["id"] = filter_.service_id

        response = self.client.get("/services", params=params)
        _raise_for_status(response, filter_.service_id or "")
        return CatalogModel.model_validate(response.json()).to_domain()

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _raise_for_status(response: httpx.Response, service_id: str) -> None:
    if response.is_success:
        return

    detail = _detail(response)
    logger.debug(
        "%s %s -> %d: %s",
        response.request.method,
        response.request.url,
        response.status_code,
        detail,
    )
    if response.status_code == httpx.codes.BAD_REQUEST:
        raise InvalidStateError(detail)
    if response.status_code == httpx.codes.NOT_FOUND:
        raise NoSuchServiceError(service_id, detail)
    if response.status_code == httpx.codes.CONFLICT:
        raise ConflictError(detail)
    response.raise_for_status()


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if not isinstance(body, dict):
        return response.text
    detail = body.get("detail", response.text)
    return detail if isinstance(detail, str) else str(detail)
