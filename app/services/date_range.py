from __future__ import annotations
import calendar
import logging
import re
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional

from app.models.domain import DateRange, UNRESOLVED

log = logging.getLogger(__name__)

MONTH_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]
_MONTHS = "|".join(MONTH_NAMES)

# "July 1st" / "1st July", anywhere in the phrase
MONTH_DAY = re.compile(rf"({_MONTHS})\s+(\d{{1,2}})(?:st|nd|rd|th)?", re.IGNORECASE)
DAY_MONTH = re.compile(rf"(\d{{1,2}})(?:st|nd|rd|th)?\s+({_MONTHS})", re.IGNORECASE)
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

def _sunday_weekday(d: date) -> int:
    """Weekday with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % 7

def _month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])

# ---------- relative phrases ----------
def _today(t: date) -> DateRange:
    return DateRange(t, t)

def _yesterday(t: date) -> DateRange:
    d = t - timedelta(days=1)
    return DateRange(d, d)

def _last_week(t: date) -> DateRange:
    end = t - timedelta(days=1)
    return DateRange(end - timedelta(days=6), end)

def _this_month(t: date) -> DateRange:
    return DateRange(t.replace(day=1), t)

def _last_weekend(t: date) -> DateRange:
    dow = _sunday_weekday(t)
    if dow in (0, 1):
        end = t - timedelta(days=1)
    else:
        end = t - timedelta(days=dow + 1)
    return DateRange(end - timedelta(days=1), end)

def _this_weekend(t: date) -> DateRange:
    dow = _sunday_weekday(t)
    if dow == 6:
        return DateRange(t, t + timedelta(days=1))
    if dow == 0:
        return DateRange(t, t)
    start = t + timedelta(days=6 - dow)
    return DateRange(start, start + timedelta(days=1))

def _past_3_days(t: date) -> DateRange:
    return DateRange(t - timedelta(days=2), t)

def _last_month(t: date) -> DateRange:
    end = t.replace(day=1) - timedelta(days=1)
    return DateRange(end.replace(day=1), end)

RELATIVE: Dict[str, Callable[[date], DateRange]] = {
    "today": _today,
    "yesterday": _yesterday,
    "last week": _last_week,
    "this month": _this_month,
    "last weekend": _last_weekend,
    "this weekend": _this_weekend,
    "past 3 days": _past_3_days,
    "current month": _this_month,
    "last month": _last_month,
}

# ---------- absolute forms ----------
def _month_day(expr: str, today: date) -> Optional[DateRange]:
    m = MONTH_DAY.search(expr)
    if m:
        month_name, day = m.group(1), m.group(2)
    else:
        m = DAY_MONTH.search(expr)
        if not m:
            return None
        day, month_name = m.group(1), m.group(2)
    try:
        d = date(today.year, MONTH_NAMES.index(month_name.lower()) + 1, int(day))
    except ValueError:
        # e.g. "June 31"
        return None
    return DateRange(d, d)

def _iso_date(expr: str) -> Optional[DateRange]:
    if not ISO_DATE.match(expr):
        return None
    try:
        d = date.fromisoformat(expr)
    except ValueError:
        return None
    return DateRange(d, d)

def _month_name(lowered: str, today: date) -> Optional[DateRange]:
    if lowered not in MONTH_NAMES:
        return None
    month = MONTH_NAMES.index(lowered) + 1
    start = date(today.year, month, 1)
    if start > today:
        # month not observed yet this year
        return UNRESOLVED
    return DateRange(start, min(_month_end(today.year, month), today))

def resolve(expr: Optional[str], today: date) -> DateRange:
    """
    Map a time expression to an inclusive [start, end] range of calendar days.

    `today` is the caller's local calendar day. Unrecognized or malformed
    expressions resolve to DateRange(None, None); nothing here raises for
    bad input.
    """
    if isinstance(today, datetime):
        today = today.date()
    if not isinstance(today, date):
        raise TypeError(f"today must be a date, got {type(today).__name__}")
    if not expr or not isinstance(expr, str):
        return UNRESOLVED

    lowered = expr.strip().lower()

    rng = _month_day(lowered, today)
    if rng is not None:
        return rng

    rule = RELATIVE.get(lowered)
    if rule is not None:
        return rule(today)

    rng = _iso_date(expr.strip())
    if rng is not None:
        return rng

    rng = _month_name(lowered, today)
    if rng is not None:
        return rng

    log.debug("time_filter=unresolved expr=%r", expr)
    return UNRESOLVED
