"""FastAPI application serving the catalog.

Routes:
    PUT /services   create (version 0) or update (version > 0) a service
    PUT /versions   add a version to an existing service
    GET /services   list a page of the catalog
    GET /health     liveness check

Domain errors map to status codes in one place (``ERROR_STATUS``); every
error body is ``{"detail": ...}``.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from svcatalog import __version__
from svcatalog.domain.errors import ConflictError, InvalidStateError, NoSuchServiceError
from svcatalog.domain.model import DEFAULT_LIMIT, Filter, Page
from svcatalog.interfaces import IdGenerator, ServiceStorage
from svcatalog.service_layer import handlers

from .schemas import CatalogModel, ServiceModel, VersionModel

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[Exception], int] = {
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    NoSuchServiceError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}

router = APIRouter()


def get_storage(request: Request) -> ServiceStorage:
    return request.app.state.storage


def get_id_generator(request: Request) -> IdGenerator:
    return request.app.state.id_generator


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.debug(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response


@router.put("/services", response_model=ServiceModel)
def put_service(
    body: ServiceModel,
    storage: ServiceStorage = Depends(get_storage),
    ids: IdGenerator = Depends(get_id_generator),
) -> ServiceModel:
    """Create a service, or append its next version.

    With ``version`` 0 the server assigns the id. Otherwise the body must carry
    the id of an existing service and the next version number.
    """
    saved = handlers.register_service(body.to_domain(), storage, ids)
    return ServiceModel.from_domain(saved)


@router.put("/versions", response_model=VersionModel)
def put_version(
    body: VersionModel, storage: ServiceStorage = Depends(get_storage)
) -> VersionModel:
    """Add a named version to an existing service."""
    saved = handlers.add_version(body.to_domain(), storage)
    return VersionModel.from_domain(saved)


@router.get("/services", response_model=CatalogModel)
def get_services(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    name: str | None = Query(None, description="Substring of the service name."),
    desc: str | None = Query(None, description="Substring of the description."),
    service_id: str | None = Query(None, alias="id", description="Exact service id."),
    offset: int = Query(0),
    limit: int = Query(DEFAULT_LIMIT),
    order: str = Query("name", description="One of name, desc, updated."),
    storage: ServiceStorage = Depends(get_storage),
) -> CatalogModel:
    """List a page of current services with their versions.

    Empty query values are treated as absent. Page options are checked by the
    store, so out-of-range values come back as 400.
    """
    filter_ = Filter(
        name_contains=name or None,
        desc_contains=desc or None,
        service_id=service_id or None,
    )
    page = Page(offset=offset, limit=limit, order_by=order)
    return CatalogModel.from_domain(handlers.list_catalog(filter_, page, storage))


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def _domain_error_handler(_: Request, exc: Exception) -> JSONResponse:
    status_code = next(
        code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)
    )
    logger.info("Request failed with %d: %s", status_code, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(storage: ServiceStorage, id_generator: IdGenerator) -> FastAPI:
    """Create the catalog application.

    Args:
        storage: Store every request reads from and writes to.
        id_generator: Source of ids for newly created services.

    Returns:
        A configured FastAPI instance.
    """
    app = FastAPI(title="svcatalog", version=__version__)
    app.state.storage = storage
    app.state.id_generator = id_generator

    for kind in ERROR_STATUS:
        app.add_exception_handler(kind, _domain_error_handler)
    app.exception_handler(RequestValidationError)(_validation_error_handler)
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(router)
    return app
