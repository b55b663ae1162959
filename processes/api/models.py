from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictInt


class ErrorResponse(BaseModel):
    error: str
    detail: str | None = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    time: str


class OptimizeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # strict: "251" and 251.0 are rejected rather than coerced
    items_ordered: StrictInt
    # falls back to the registry when omitted
    pack_sizes: list[StrictInt] | None = None


class PackBreakdownModel(BaseModel):
    size: int
    count: int


class PlanResponse(BaseModel):
    items_ordered: int
    total_items: int
    total_packs: int
    packs: list[PackBreakdownModel]


class PackSizesRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pack_sizes: list[StrictInt]


class PackSizesResponse(BaseModel):
    pack_sizes: list[int]
