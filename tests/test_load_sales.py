import pandas as pd
import pytest

from scripts.load_sales import prepare, sqlite_file


def test_prepare_normalizes_rows():
    raw = pd.DataFrame([
        {"date": "2025-07-20", "store": " Store A ", "item_name": "Mouse", "revenue": "100", "quantity": "2", "extra": 1},
        {"date": "2025-07-21", "store": "Store B", "item_name": "Laptop", "revenue": None, "quantity": -1, "extra": 2},
    ])
    df = prepare(raw)
    assert list(df.columns) == ["date", "store", "item_name", "revenue", "quantity"]
    assert df["date"].tolist() == ["2025-07-20", "2025-07-21"]
    assert df["store"].tolist() == ["Store A", "Store B"]
    assert df["revenue"].tolist() == [100.0, 0.0]
    assert df["quantity"].tolist() == [2, 0]


def test_prepare_requires_columns():
    with pytest.raises(ValueError):
        prepare(pd.DataFrame([{"date": "2025-07-20", "store": "A"}]))


def test_sqlite_file_accepts_url_or_path(tmp_path):
    url_target = sqlite_file(f"sqlite:///{tmp_path}/warehouse/sales.db")
    assert url_target == (tmp_path / "warehouse" / "sales.db").resolve()
    assert url_target.parent.is_dir()
    assert sqlite_file(str(tmp_path / "plain.db")) == (tmp_path / "plain.db").resolve()
