from __future__ import annotations
from dataclasses import dataclass, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional

class QueryType(str, Enum):
    TOTAL_SALES = "total_sales"
    AVERAGE_REVENUE = "average_revenue"
    ITEMS_SOLD = "items_sold"
    TOTAL_QUANTITY = "total_quantity"
    SALES_FOR_STORE = "sales_for_store"
    MOST_PROFITABLE_STORE = "most_profitable_store"
    LEAST_PROFITABLE_STORE = "least_profitable_store"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "QueryType":
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.OTHER

EXTREMAL_TYPES = (QueryType.MOST_PROFITABLE_STORE, QueryType.LEAST_PROFITABLE_STORE)

@dataclass(frozen=True)
class DateRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_set(self) -> bool:
        return self.start is not None and self.end is not None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "start_date": self.start.isoformat() if self.start else None,
            "end_date": self.end.isoformat() if self.end else None,
        }

UNRESOLVED = DateRange()

@dataclass(frozen=True)
class SaleRecord:
    date: date
    store: str
    item_name: str
    revenue: float
    quantity: int

def _opt_str(v: Any) -> Optional[str]:
    # nullable strings only; anything else counts as absent
    if isinstance(v, str) and v.strip():
        return v
    return None

@dataclass(frozen=True)
class QueryIntent:
    query_type: QueryType
    time_filter: Optional[str] = None
    store_name: Optional[str] = None
    item_name: Optional[str] = None
    raw_query_type: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "QueryIntent":
        raw_type = _opt_str(payload.get("query_type"))
        return cls(
            query_type=QueryType.parse(raw_type),
            time_filter=_opt_str(payload.get("time_filter")),
            store_name=_opt_str(payload.get("store_name")),
            item_name=_opt_str(payload.get("item_name")),
            raw_query_type=raw_type,
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "query_type": self.query_type.value,
            "time_filter": self.time_filter,
            "store_name": self.store_name,
            "item_name": self.item_name,
        }

@dataclass(frozen=True)
class RecordFilter:
    date_range: DateRange = UNRESOLVED
    store_name_contains: Optional[str] = None
    item_name_contains: Optional[str] = None

@dataclass(frozen=True)
class AggregationResult:
    total_revenue: float
    total_quantity: int
    average_revenue: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass(frozen=True)
class StoreTotal:
    store: str
    total_revenue: float
