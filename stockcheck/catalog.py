"""
Stock Catalog - Read-only query surface over the stock and replenishment
indices.

Only the first query against each index waits on I/O; every later call is
a dictionary lookup on the memoized index.

Usage:
    catalog = StockCatalog(HttpDocumentSource(base_url))
    refs = await catalog.get_unique_refs()
    qty = await catalog.get_stock("NS221", "Forest Green", "S")
"""

import asyncio
import logging
from typing import Optional

from .loader import SingleFlightLoader
from .models import ReplenishmentEntry, ReplenishmentSummary, SizeAvailability
from .normalize import UNKNOWN_DATE
from .replenishment_index import ReplenishmentIndex, index_replenishment_text
from .sources import DocumentSource
from .stock_index import StockIndex, index_stock_text

logger = logging.getLogger(__name__)

DEFAULT_STOCK_RESOURCE = "NATIVE_SPIRIT_STOCKWEB_NS.csv"
DEFAULT_REPLENISHMENT_RESOURCE = "NATIVE_SPIRIT_REAPPROWEB_NS (2).csv"


class StockCatalog:
    """
    Owns one stock index and one replenishment index for a source.

    Each index is built at most once per catalog; concurrent first calls
    share a single fetch.
    """

    def __init__(
        self,
        source: DocumentSource,
        stock_resource: str = DEFAULT_STOCK_RESOURCE,
        replenishment_resource: str = DEFAULT_REPLENISHMENT_RESOURCE,
    ):
        self.source = source
        self.stock_resource = stock_resource
        self.replenishment_resource = replenishment_resource
        self._stock = SingleFlightLoader(stock_resource, self._build_stock)
        self._replenishment = SingleFlightLoader(replenishment_resource, self._build_replenishment)

    async def _fetch(self, name: str) -> str:
        logger.info("Fetching %s", self.source.describe(name))
        return await asyncio.to_thread(self.source.fetch, name)

    async def _build_stock(self) -> StockIndex:
        text = await self._fetch(self.stock_resource)
        return index_stock_text(text, name=self.stock_resource)

    async def _build_replenishment(self) -> ReplenishmentIndex:
        text = await self._fetch(self.replenishment_resource)
        return index_replenishment_text(text, name=self.replenishment_resource)

    # --- loading -------------------------------------------------------------

    async def load_stock(self) -> StockIndex:
        """Stock index, fetched and built on first use."""
        return await self._stock.get()

    async def load_reappro(self) -> ReplenishmentIndex:
        """Replenishment index, fetched and built on first use."""
        return await self._replenishment.get()

    async def reload(self):
        """Rebuild both indices from the source."""
        await asyncio.gather(self._stock.reload(), self._replenishment.reload())

    def status(self) -> dict:
        """Load state of both indices, without triggering a load."""
        stock = self._stock.value
        reappro = self._replenishment.value
        return {
            "stock_loaded": self._stock.is_loaded,
            "stock_resource": self.stock_resource,
            "stock_header_mode": stock.header_mode.value if stock else None,
            "stock_record_count": stock.record_count if stock else 0,
            "stock_dropped_count": stock.dropped_count if stock else 0,
            "reappro_loaded": self._replenishment.is_loaded,
            "reappro_resource": self.replenishment_resource,
            "reappro_header_mode": reappro.header_mode.value if reappro else None,
            "reappro_record_count": reappro.record_count if reappro else 0,
            "reappro_dropped_count": reappro.dropped_count if reappro else 0,
        }

    # --- stock queries -------------------------------------------------------

    async def get_unique_refs(self) -> list[str]:
        index = await self.load_stock()
        return index.unique_refs()

    async def get_colors_for(self, ref: str) -> list[str]:
        index = await self.load_stock()
        return index.colors_for(ref)

    async def get_sizes_for(self, ref: str, color: str) -> list[str]:
        index = await self.load_stock()
        return index.sizes_for(ref, color)

    async def get_stock(self, ref: str, color: str, size: str) -> int:
        index = await self.load_stock()
        return index.stock(ref, color, size)

    # --- replenishment queries -----------------------------------------------

    async def get_reappro_all(self, ref: str, color: str, size: str) -> list[ReplenishmentEntry]:
        index = await self.load_reappro()
        return index.entries(ref, color, size)

    async def get_reappro(self, ref: str, color: str, size: str) -> Optional[ReplenishmentSummary]:
        index = await self.load_reappro()
        return index.summary(ref, color, size)

    # --- combined ------------------------------------------------------------

    async def get_availability(self, ref: str, color: str) -> list[SizeAvailability]:
        """
        Stock table for one reference and color: one row per stocked size.

        Sizes come from the stock export; replenishment for a size that has
        no stock row is not listed.
        """
        sizes = await self.get_sizes_for(ref, color)
        if not sizes:
            return []

        stock_index, reappro_index = await asyncio.gather(self.load_stock(), self.load_reappro())

        rows = []
        for size in sizes:
            detail = reappro_index.entries(ref, color, size)
            summary = reappro_index.summary(ref, color, size)
            rows.append(SizeAvailability(
                size=size,
                stock=stock_index.stock(ref, color, size),
                reappro_date=summary.date if summary else UNKNOWN_DATE,
                reappro_quantity=summary.quantity if summary else None,
                reappro_detail=tuple(detail),
            ))
        return rows
