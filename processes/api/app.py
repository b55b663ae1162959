from __future__ import annotations

import json
import logging
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request, Response

from processes.api.models import (
    ErrorResponse,
    HealthResponse,
    OptimizeRequest,
    PackSizesRequest,
    PackSizesResponse,
    PlanResponse,
)
from processes.optimizer.engine import optimize
from processes.optimizer.types import CLIENT_ERRORS, OptimizerError
from processes.pack_sizes import PackSizeRegistry
from processes.settings import Settings, load_settings

VERSION = "0.1.0"

logger = logging.getLogger("processes.api")

router = APIRouter(prefix="/api")


def _log(event: str, endpoint: str, **fields: Any) -> None:
    logger.info(json.dumps({"event": event, "endpoint": endpoint, **fields}))


def get_registry(request: Request) -> PackSizeRegistry:
    return request.app.state.pack_sizes


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _client_error(response: Response, err: OptimizerError) -> ErrorResponse:
    response.status_code = 400
    return ErrorResponse(error=err.code.value.lower(), detail=err.message)


@router.get("/health", response_model=HealthResponse)  # type: ignore[misc]
def health() -> HealthResponse:
    t0 = time.time()
    _log("api_enter", "/api/health")
    out = HealthResponse(
        status="ok",
        version=VERSION,
        time=datetime.now(UTC).isoformat(),
    )
    _log("api_exit", "/api/health", dt_s=round(time.time() - t0, 6))
    return out


@router.post(
    "/optimize",
    response_model=PlanResponse | ErrorResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)  # type: ignore[misc]
def run_optimize(
    req: OptimizeRequest,
    response: Response,
    registry: PackSizeRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
) -> PlanResponse | ErrorResponse:
    t0 = time.time()
    _log(
        "api_enter",
        "/api/optimize",
        items_ordered=req.items_ordered,
        pack_sizes=req.pack_sizes,
    )
    pack_sizes = req.pack_sizes if req.pack_sizes is not None else registry.get_pack_sizes()
    try:
        plan = optimize(
            req.items_ordered,
            pack_sizes,
            max_table_entries=settings.max_table_entries,
        )
    except CLIENT_ERRORS as e:
        _log("api_reject", "/api/optimize", code=e.code.value, detail=e.message)
        return _client_error(response, e)
    except OptimizerError as e:
        logger.error(
            json.dumps(
                {
                    "event": "api_error",
                    "endpoint": "/api/optimize",
                    "code": e.code.value,
                    "detail": e.message,
                    "details": e.details,
                }
            )
        )
        response.status_code = 500
        return ErrorResponse(
            error="internal_error", detail="unable to optimize pack breakdown"
        )

    out = PlanResponse.model_validate(plan.to_dict())
    _log(
        "api_exit",
        "/api/optimize",
        dt_s=round(time.time() - t0, 6),
        total_items=plan.total_items,
        total_packs=plan.total_packs,
    )
    return out


@router.get("/pack-sizes", response_model=PackSizesResponse)  # type: ignore[misc]
def get_pack_sizes(
    registry: PackSizeRegistry = Depends(get_registry),
) -> PackSizesResponse:
    t0 = time.time()
    _log("api_enter", "/api/pack-sizes")
    out = PackSizesResponse(pack_sizes=registry.get_pack_sizes())
    _log("api_exit", "/api/pack-sizes", dt_s=round(time.time() - t0, 6))
    return out


@router.put(
    "/pack-sizes",
    response_model=PackSizesResponse | ErrorResponse,
    responses={400: {"model": ErrorResponse}},
)  # type: ignore[misc]
def put_pack_sizes(
    req: PackSizesRequest,
    response: Response,
    registry: PackSizeRegistry = Depends(get_registry),
) -> PackSizesResponse | ErrorResponse:
    t0 = time.time()
    _log("api_enter", "/api/pack-sizes", method="PUT", pack_sizes=req.pack_sizes)
    try:
        updated = registry.set_pack_sizes(req.pack_sizes)
    except CLIENT_ERRORS as e:
        _log("api_reject", "/api/pack-sizes", code=e.code.value, detail=e.message)
        return _client_error(response, e)
    out = PackSizesResponse(pack_sizes=updated)
    _log(
        "api_exit",
        "/api/pack-sizes",
        method="PUT",
        dt_s=round(time.time() - t0, 6),
        pack_sizes=updated,
    )
    return out


def create_app(
    registry: PackSizeRegistry | None = None, settings: Settings | None = None
) -> FastAPI:
    """Build the API with its own registry and settings.

    When no registry is given one is created from ``settings.pack_sizes``.
    """
    settings = settings or Settings()
    application = FastAPI(title="Pack Fulfillment Optimizer", version=VERSION)
    application.state.settings = settings
    application.state.pack_sizes = registry or PackSizeRegistry(settings.pack_sizes)
    application.include_router(router)
    return application


def app_from_env() -> FastAPI:
    """Factory for ``uvicorn --factory processes.api.app:app_from_env``.

    Settings are resolved when the server starts, not at import.
    """
    return create_app(settings=load_settings())
