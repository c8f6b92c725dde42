from __future__ import annotations
import math
from typing import Dict, Iterable, Literal, Optional, Sequence

from app.models.domain import AggregationResult, SaleRecord, StoreTotal

Direction = Literal["max", "min"]

def aggregate_flat(records: Sequence[SaleRecord]) -> AggregationResult:
    total_revenue = sum(r.revenue for r in records)
    total_quantity = sum(r.quantity for r in records)
    count = len(records)
    return AggregationResult(
        total_revenue=total_revenue,
        total_quantity=total_quantity,
        average_revenue=(total_revenue / count) if count else 0.0,
        count=count,
    )

def group_by_store_total_revenue(records: Iterable[SaleRecord]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for r in records:
        totals[r.store] = totals.get(r.store, 0) + r.revenue
    return totals

def pick_extremal_store(grouped: Dict[str, float], direction: Direction) -> Optional[StoreTotal]:
    """
    Store with the highest ("max") or lowest ("min") summed revenue.

    "max" starts from 0, so a store needs a strictly positive total to win;
    an all non-positive set has no most profitable store. "min" starts from
    +inf. Comparisons are strict, so the first store seen keeps a tie.
    """
    if direction == "max":
        best_total, better = 0.0, lambda v, b: v > b
    elif direction == "min":
        best_total, better = math.inf, lambda v, b: v < b
    else:
        raise ValueError(f"direction must be 'max' or 'min', got {direction!r}")

    best_store = None
    for store, total in grouped.items():
        if better(total, best_total):
            best_store, best_total = store, total
    if best_store is None:
        return None
    return StoreTotal(store=best_store, total_revenue=best_total)
