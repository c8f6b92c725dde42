"""
Pytest configuration and shared fixtures.
"""

from datetime import date

import pandas as pd
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.models.domain import SaleRecord
from app.services.records import SqlRecordStore

# a Monday
TODAY = date(2025, 7, 21)

SALES_ROWS = [
    {"date": "2025-07-19", "store": "Store A", "item_name": "Laptop", "revenue": 1200.0, "quantity": 1},
    {"date": "2025-07-19", "store": "Store B", "item_name": "Mouse", "revenue": 50.0, "quantity": 2},
    {"date": "2025-07-20", "store": "Store A", "item_name": "Mouse", "revenue": 100.0, "quantity": 2},
    {"date": "2025-07-20", "store": "Store C", "item_name": "Keyboard", "revenue": 300.0, "quantity": 3},
    {"date": "2025-07-21", "store": "Store B", "item_name": "Laptop", "revenue": 900.0, "quantity": 1},
    {"date": "2025-06-10", "store": "Store C", "item_name": "Monitor", "revenue": 450.5, "quantity": 1},
]


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch):
    """Never reach the LLM from tests."""
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "INTENT_PARSER_MODE", "auto")
    monkeypatch.setattr(settings, "CURRENCY_SYMBOL", "₹")


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def sale_records():
    return [
        SaleRecord(date=date.fromisoformat(r["date"]), store=r["store"], item_name=r["item_name"],
                   revenue=r["revenue"], quantity=r["quantity"])
        for r in SALES_ROWS
    ]


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    pd.DataFrame(SALES_ROWS).to_sql("sale_records", eng, index=False)
    yield eng
    eng.dispose()


@pytest.fixture
def record_store(engine):
    return SqlRecordStore(engine)
