"""
Stock checker API router.

Read-only lookups over the stock and replenishment exports. Both indices
load on the first request that needs them; a failed load is a 503 and the
next request tries again.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from backend.core.config import get_settings
from backend.api.models import (
    ReapproEntryResponse,
    ReapproSummaryResponse,
    SizeAvailabilityResponse,
    StatusResponse,
)

from stockcheck import StockCatalog, ResourceUnavailable, build_catalog, load_config
from stockcheck.config import use_directory
from stockcheck.report import export_csv, format_console

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stock"])


_catalog: Optional[StockCatalog] = None


def create_catalog() -> StockCatalog:
    """Build a catalog from the current settings."""
    settings = get_settings()
    config = load_config(settings.CONFIG_PATH)
    if settings.SOURCE_DIR:
        config = use_directory(config, settings.SOURCE_DIR)
    return build_catalog(config)


async def get_catalog() -> StockCatalog:
    """
    Process-wide catalog, built from settings on first use.

    Runs on the event loop, not the threadpool, so concurrent first
    requests all get the same catalog and share its loads.
    """
    global _catalog
    if _catalog is None:
        _catalog = create_catalog()
    return _catalog


def _unavailable(e: ResourceUnavailable) -> HTTPException:
    logger.error("Could not load %s: %s", e.resource, e)
    return HTTPException(status_code=503, detail=f"Could not load {e.resource}: {e}")


@router.get("/api/status", response_model=StatusResponse)
def stock_status(catalog: StockCatalog = Depends(get_catalog)):
    """Load state of both indices. Never triggers a load."""
    return catalog.status()


@router.get("/api/refs", response_model=List[str])
async def list_refs(catalog: StockCatalog = Depends(get_catalog)):
    """All base references, alphabetically."""
    try:
        return await catalog.get_unique_refs()
    except ResourceUnavailable as e:
        raise _unavailable(e)


@router.get("/api/refs/{ref}/colors", response_model=List[str])
async def list_colors(ref: str, catalog: StockCatalog = Depends(get_catalog)):
    """Colors stocked for a reference (variant suffixes accepted)."""
    try:
        return await catalog.get_colors_for(ref)
    except ResourceUnavailable as e:
        raise _unavailable(e)


@router.get("/api/sizes", response_model=List[str])
async def list_sizes(
    ref: str = Query(...),
    color: str = Query(...),
    catalog: StockCatalog = Depends(get_catalog),
):
    """Sizes for a reference and color, in size order."""
    try:
        return await catalog.get_sizes_for(ref, color)
    except ResourceUnavailable as e:
        raise _unavailable(e)


@router.get("/api/stock")
async def get_stock(
    ref: str = Query(...),
    color: str = Query(...),
    size: str = Query(...),
    catalog: StockCatalog = Depends(get_catalog),
):
    """On-hand quantity, 0 for an unknown key."""
    try:
        quantity = await catalog.get_stock(ref, color, size)
    except ResourceUnavailable as e:
        raise _unavailable(e)
    return {"ref": ref, "color": color, "size": size, "stock": quantity}


@router.get("/api/reappro", response_model=Optional[ReapproSummaryResponse])
async def get_reappro(
    ref: str = Query(...),
    color: str = Query(...),
    size: str = Query(...),
    catalog: StockCatalog = Depends(get_catalog),
):
    """Earliest receive date and total incoming quantity, or null."""
    try:
        summary = await catalog.get_reappro(ref, color, size)
    except ResourceUnavailable as e:
        raise _unavailable(e)
    if summary is None:
        return None
    return ReapproSummaryResponse(date=summary.date, quantity=summary.quantity)


@router.get("/api/reappro/detail", response_model=List[ReapproEntryResponse])
async def get_reappro_detail(
    ref: str = Query(...),
    color: str = Query(...),
    size: str = Query(...),
    catalog: StockCatalog = Depends(get_catalog),
):
    """Incoming quantity per receive date, earliest first."""
    try:
        entries = await catalog.get_reappro_all(ref, color, size)
    except ResourceUnavailable as e:
        raise _unavailable(e)
    return [ReapproEntryResponse(date=e.date, quantity=e.quantity) for e in entries]


@router.get("/api/availability", response_model=List[SizeAvailabilityResponse])
async def get_availability(
    ref: str = Query(...),
    color: str = Query(...),
    catalog: StockCatalog = Depends(get_catalog),
):
    """Stock table: one row per size with its replenishment."""
    try:
        rows = await catalog.get_availability(ref, color)
    except ResourceUnavailable as e:
        raise _unavailable(e)

    return [
        SizeAvailabilityResponse(
            size=r.size,
            stock=r.stock,
            in_stock=r.in_stock,
            reappro_date=r.reappro_date,
            reappro_quantity=r.reappro_quantity,
            reappro_detail=[
                ReapproEntryResponse(date=e.date, quantity=e.quantity) for e in r.reappro_detail
            ],
        )
        for r in rows
    ]


@router.get("/api/availability/report")
async def availability_report(
    ref: str = Query(...),
    color: str = Query(...),
    format: str = Query("text", pattern="^(text|csv)$"),
    catalog: StockCatalog = Depends(get_catalog),
):
    """Formatted stock table as plain text or CSV."""
    try:
        rows = await catalog.get_availability(ref, color)
    except ResourceUnavailable as e:
        raise _unavailable(e)

    if format == "csv":
        return Response(content=export_csv(rows, ref=ref, color=color), media_type="text/csv")
    return Response(content=format_console(ref, color, rows), media_type="text/plain")


@router.post("/api/reload")
async def reload_catalog(catalog: StockCatalog = Depends(get_catalog)):
    """Rebuild both indices from the source."""
    try:
        await catalog.reload()
    except ResourceUnavailable as e:
        raise _unavailable(e)
    return {"success": True, **catalog.status()}
