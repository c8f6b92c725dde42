from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional

from app.core.config import settings
from app.core.errors import RetrievalFailure
from app.models.domain import (
    DateRange, EXTREMAL_TYPES, QueryIntent, QueryType, RecordFilter, SaleRecord,
)
from app.services.aggregator import aggregate_flat, group_by_store_total_revenue, pick_extremal_store
from app.services.date_range import resolve

log = logging.getLogger(__name__)

Fetch = Callable[[RecordFilter], List[SaleRecord]]

RETRIEVAL_ERRORS = {
    QueryType.MOST_PROFITABLE_STORE: "Error fetching data for most profitable store.",
    QueryType.LEAST_PROFITABLE_STORE: "Error fetching data for least profitable store.",
}
RETRIEVAL_ERROR_DEFAULT = "Error fetching data from database."

@dataclass(frozen=True)
class ChatAnswer:
    ok: bool
    response: str

# ---------- phrases ----------
def _money(x: float, currency: str) -> str:
    return f"{currency}{x:.2f}"

def range_phrase(rng: DateRange, time_filter: Optional[str]) -> str:
    if rng.is_set and rng.start == rng.end:
        return f"on {rng.start.isoformat()}"
    if rng.is_set:
        return f"between {rng.start.isoformat()} and {rng.end.isoformat()}"
    if time_filter:
        # no filter was applied; echo what the user asked for
        return f"for {time_filter}"
    return ""

def _for(value: Optional[str]) -> str:
    return f"for {value}" if value else ""

def build_filter(intent: QueryIntent, rng: DateRange) -> RecordFilter:
    if intent.query_type in EXTREMAL_TYPES:
        # ranked across every store
        return RecordFilter(date_range=rng)
    return RecordFilter(
        date_range=rng,
        store_name_contains=intent.store_name,
        item_name_contains=intent.item_name,
    )

# ---------- formatting ----------
def _format_extremal(intent: QueryIntent, rng: DateRange, records: List[SaleRecord], currency: str) -> str:
    most = intent.query_type is QueryType.MOST_PROFITABLE_STORE
    word = "most" if most else "least"
    if not records:
        return f"No sales data found to determine the {word} profitable store {_for(intent.time_filter)}."

    when = range_phrase(rng, intent.time_filter)
    winner = pick_extremal_store(group_by_store_total_revenue(records), "max" if most else "min")
    if winner is None:
        return f"Could not determine the {word} profitable store {when}."
    return (f"The store that made the {word} profit {when} was {winner.store} "
            f"with a total revenue of {_money(winner.total_revenue, currency)}.")

def _format_flat(intent: QueryIntent, rng: DateRange, records: List[SaleRecord],
                 user_query: str, currency: str) -> str:
    if not records:
        return (f'No sales data found for your request: "{user_query}". '
                f"Please try another query or adjust the time/store/item filters.")

    agg = aggregate_flat(records)
    when = range_phrase(rng, intent.time_filter)
    store = _for(intent.store_name)
    item = _for(intent.item_name)
    revenue = _money(agg.total_revenue, currency)
    qt = intent.query_type

    if qt in (QueryType.TOTAL_SALES, QueryType.SALES_FOR_STORE):
        return f"Total sales {store} {item} {when} was {revenue} from {agg.total_quantity} items."
    if qt is QueryType.AVERAGE_REVENUE:
        return f"Average revenue {store} {item} {when} was {_money(agg.average_revenue, currency)}."
    if qt is QueryType.ITEMS_SOLD:
        return f"Total items sold {store} {item} {when} was {agg.total_quantity}."
    if qt is QueryType.TOTAL_QUANTITY:
        return f"Total quantity sold {store} {item} {when} was {agg.total_quantity}."
    # QueryType.OTHER and anything the parser invented
    return (f'For your query: "{user_query}", I found total revenue of {revenue} '
            f"and {agg.total_quantity} items sold {store} {item} {when}.")

# ---------- entry points ----------
def dispatch(intent: QueryIntent, today: date, fetch: Fetch,
             user_query: str = "", currency: Optional[str] = None) -> str:
    """
    Resolve the intent's time filter, fetch matching records and render the
    one-sentence answer. RetrievalFailure from `fetch` propagates.
    """
    currency = settings.CURRENCY_SYMBOL if currency is None else currency
    rng = resolve(intent.time_filter, today)

    if rng.is_set:
        log.info("query_type=%s range=%s..%s", intent.query_type.value, rng.start, rng.end)
    elif intent.time_filter:
        log.warning("query_type=%s reason=unresolved_time_filter time_filter=%r",
                    intent.query_type.value, intent.time_filter)
    if intent.query_type is QueryType.OTHER and intent.raw_query_type:
        log.info("query_type=other raw=%r", intent.raw_query_type)

    records = fetch(build_filter(intent, rng))
    log.info("query_type=%s records=%d", intent.query_type.value, len(records))

    if intent.query_type in EXTREMAL_TYPES:
        return _format_extremal(intent, rng, records, currency)
    return _format_flat(intent, rng, records, user_query, currency)

def answer_query(user_query: str, intent: QueryIntent, today: date, fetch: Fetch,
                 currency: Optional[str] = None) -> ChatAnswer:
    try:
        return ChatAnswer(ok=True, response=dispatch(intent, today, fetch, user_query, currency))
    except RetrievalFailure as e:
        log.error("query_type=%s reason=retrieval_failed err=%s", intent.query_type.value, e)
        return ChatAnswer(ok=False, response=RETRIEVAL_ERRORS.get(intent.query_type, RETRIEVAL_ERROR_DEFAULT))
