"""
Pydantic response models for the API.
"""
from pydantic import BaseModel
from typing import List, Optional

from stockcheck.normalize import UNKNOWN_DATE


class ReapproEntryResponse(BaseModel):
    date: str
    quantity: int


class ReapproSummaryResponse(BaseModel):
    date: str
    quantity: int


class SizeAvailabilityResponse(BaseModel):
    size: str
    stock: int
    in_stock: bool
    reappro_date: str = UNKNOWN_DATE
    reappro_quantity: Optional[int] = None
    reappro_detail: List[ReapproEntryResponse] = []


class StatusResponse(BaseModel):
    stock_loaded: bool
    stock_resource: str
    stock_header_mode: Optional[str] = None
    stock_record_count: int = 0
    stock_dropped_count: int = 0
    reappro_loaded: bool
    reappro_resource: str
    reappro_header_mode: Optional[str] = None
    reappro_record_count: int = 0
    reappro_dropped_count: int = 0
