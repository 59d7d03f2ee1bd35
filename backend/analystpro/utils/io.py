import pandas as pd
from pathlib import Path


def _read_json(p: Path) -> pd.DataFrame:
    # JSON lines first, plain JSON array as fallback
    try:
        return pd.read_json(p, lines=True)
    except ValueError:
        return pd.read_json(p)


def read_any(path: str) -> pd.DataFrame:
    p = Path(path)
    if p.suffix.lower() in [".csv"]:
        return pd.read_csv(p)
    if p.suffix.lower() in [".tsv"]:
        return pd.read_csv(p, sep="\t")
    if p.suffix.lower() in [".xlsx", ".xls"]:
        # first sheet only
        return pd.read_excel(p, sheet_name=0)
    if p.suffix.lower() in [".json"]:
        return _read_json(p)
    if p.suffix.lower() in [".parquet"]:
        return pd.read_parquet(p)
    raise ValueError(f"Unsupported file type: {p.suffix}")
