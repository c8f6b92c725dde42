from __future__ import annotations
import logging
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import RetrievalFailure
from app.models.domain import RecordFilter, SaleRecord

log = logging.getLogger(__name__)

TABLE = "sale_records"
COLUMNS = ["date", "store", "item_name", "revenue", "quantity"]

def build_select(flt: RecordFilter) -> tuple[str, Dict[str, Any]]:
    """SELECT over sale_records, bounded by the date range when one is set."""
    params: Dict[str, Any] = {}
    sql = f"SELECT {', '.join(COLUMNS)} FROM {TABLE}"
    if flt.date_range.is_set:
        sql += " WHERE date BETWEEN :start AND :end"
        params["start"] = flt.date_range.start.isoformat()
        params["end"] = flt.date_range.end.isoformat()
    return sql, params

def apply_contains(df: pd.DataFrame, flt: RecordFilter) -> pd.DataFrame:
    # SQLite's lower() only folds ASCII, so substring matching happens here
    for col, needle in (("store", flt.store_name_contains), ("item_name", flt.item_name_contains)):
        if needle and not df.empty:
            mask = df[col].astype(str).str.casefold().str.contains(needle.casefold(), regex=False)
            df = df[mask]
    return df

def frame_to_records(df: pd.DataFrame) -> List[SaleRecord]:
    if df.empty:
        return []
    df = df.copy()
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    bad = df["date"].isna()
    if bad.any():
        log.warning("records reason=bad_date dropped=%d", int(bad.sum()))
        df = df[~bad].copy()
    df["date"] = df["date"].dt.date
    df["revenue"] = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0)
    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).astype(int)
    return [
        SaleRecord(date=row.date, store=str(row.store), item_name=str(row.item_name),
                   revenue=float(row.revenue), quantity=int(row.quantity))
        for row in df[COLUMNS].itertuples(index=False)
    ]

class SqlRecordStore:
    def __init__(self, engine: Engine):
        self.engine = engine

    def fetch(self, flt: RecordFilter) -> List[SaleRecord]:
        sql, params = build_select(flt)
        log.debug("records sql=%s params=%s", sql, params)
        try:
            with self.engine.connect() as con:
                df = pd.read_sql(text(sql), con, params=params)
        except (SQLAlchemyError, pd.errors.DatabaseError) as e:
            raise RetrievalFailure(str(e)) from e
        return frame_to_records(apply_contains(df, flt))
