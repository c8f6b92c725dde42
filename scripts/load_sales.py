import argparse, pathlib, sqlite3, sys
import pandas as pd

REQUIRED = ["date", "store", "item_name", "revenue", "quantity"]

def sqlite_file(db_uri: str) -> pathlib.Path:
    """File behind a sqlite:/// URL (or a bare path); parent dirs are created."""
    p = pathlib.Path(db_uri.removeprefix("sqlite:///")).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return p

def prepare(df: pd.DataFrame) -> pd.DataFrame:
    missing = [c for c in REQUIRED if c not in df.columns]
    if missing:
        raise ValueError(f"CSV is missing columns: {missing}")
    df = df[REQUIRED].copy()
    # dates stored as YYYY-MM-DD text so BETWEEN compares lexically
    df["date"] = pd.to_datetime(df["date"]).dt.strftime("%Y-%m-%d")
    df["store"] = df["store"].astype(str).str.strip()
    df["item_name"] = df["item_name"].astype(str).str.strip()
    df["revenue"] = pd.to_numeric(df["revenue"], errors="coerce").fillna(0.0).clip(lower=0)
    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce").fillna(0).clip(lower=0).astype(int)
    return df

def load_sales(csv_path: pathlib.Path, db_uri: str):
    csv_path = csv_path.expanduser().resolve()
    if not csv_path.exists():
        print(f"[ERROR] CSV not found: {csv_path}", file=sys.stderr)
        sys.exit(2)

    db_path = sqlite_file(db_uri)
    df = prepare(pd.read_csv(csv_path, na_values=["", "null", "None"]))

    con = sqlite3.connect(str(db_path))
    con.execute("PRAGMA journal_mode=WAL;")
    df.to_sql("sale_records", con, if_exists="replace", index=False)
    con.executescript("""
    CREATE INDEX IF NOT EXISTS idx_sales_date ON sale_records(date);
    CREATE INDEX IF NOT EXISTS idx_sales_store ON sale_records(store);
    """)
    con.commit()
    con.close()
    print(f"[OK] Loaded {len(df)} rows into {db_path}")

if __name__ == "__main__":
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True, help="CSV with date,store,item_name,revenue,quantity")
    ap.add_argument("--db", default="sqlite:///data/sales.db")
    args = ap.parse_args()
    load_sales(pathlib.Path(args.csv), args.db)
