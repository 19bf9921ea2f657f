# rankmatch/cli.py
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from loguru import logger

from .compare import compare_lists
from .config import DEFAULT_LOG_FILE, Item, ListComparisonResult
from .logging_setup import configure_logging

REQUIRED_COLUMNS = ("title", "artist")
OPTIONAL_COLUMNS = ("id", "album_title", "cover_art_url", "rank")

# ---------- IO helpers ----------

def _norm_col(s: str) -> str:
    return str(s).strip().lower().replace(" ", "_").replace("-", "_")

def _read_any(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    ext = path.suffix.lower()
    # every cell is text: titles like "007", "1.50" or "None" must survive intact
    if ext in [".xlsx", ".xls"]:
        df = pd.read_excel(path, dtype=str, keep_default_na=False)
    elif ext == ".json":
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    else:
        df = pd.read_csv(path, encoding="utf-8", dtype=str, keep_default_na=False)
    df = df.rename(columns={c: _norm_col(c) for c in df.columns})
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(
            f"Expected columns {list(REQUIRED_COLUMNS)} in {path}. Found: {list(df.columns)}"
        )
    return df

def _cell(row: pd.Series, col: str) -> Optional[str]:
    if col not in row.index:
        return None
    val = row[col]
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return None
    s = str(val).strip()
    return s or None

def frame_to_items(df: pd.DataFrame) -> List[Item]:
    """
    Rows -> Items in rank order. A ``rank`` column, when present, decides
    the order (stable for equal ranks); otherwise file order is rank order.
    Rows without an ``id`` get their 1-based row position.
    """
    if "rank" in df.columns:
        # ranks arrive as text; "10" must sort after "2"
        order = pd.to_numeric(df["rank"], errors="coerce")
        df = df.assign(_rank_order=order).sort_values(
            "_rank_order", kind="stable", na_position="last"
        )
    items: List[Item] = []
    for pos, (_, row) in enumerate(df.iterrows(), start=1):
        items.append(
            Item(
                id=_cell(row, "id") or str(pos),
                title=_cell(row, "title") or "",
                artist=_cell(row, "artist") or "",
                album_title=_cell(row, "album_title"),
                cover_art_url=_cell(row, "cover_art_url"),
            )
        )
    return items

def load_ranked_list(path: Path) -> List[Item]:
    df = _read_any(Path(path))
    items = frame_to_items(df)
    logger.info("Loaded {} ranked items from {}", len(items), path)
    return items

# ---------- report ----------

def format_report(result: ListComparisonResult) -> str:
    lines = [f"Similarity: {result.similarity}%"]
    lines.append(f"Shared items: {len(result.shared_items)}")
    for s in result.shared_items:
        arrow = {"up": "^", "down": "v", "same": "="}[s.direction.value]
        lines.append(
            f"  {s.your_rank:>3} -> {s.their_rank:<3} {arrow}{s.delta_magnitude:<3} "
            f"{s.item.title} - {s.item.artist}"
        )
    lines.append(f"Only in your list: {len(result.only_in_your_list)}")
    for it in result.only_in_your_list:
        lines.append(f"  {it.title} - {it.artist}")
    lines.append(f"Only in their list: {len(result.only_in_their_list)}")
    for it in result.only_in_their_list:
        lines.append(f"  {it.title} - {it.artist}")
    return "\n".join(lines)

# ---------- CLI ----------

def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Compare two ranked lists (CSV, JSON or Excel) and report agreement."
    )
    ap.add_argument("yours", type=Path, help="Your ranked list, best first")
    ap.add_argument("theirs", type=Path, help="Their ranked list, best first")
    ap.add_argument("--json", action="store_true", help="Print the full result as JSON")
    ap.add_argument("--log-level", default=None, help="Override RANKMATCH_LOG_LEVEL")
    ap.add_argument("--log-file", type=Path, nargs="?", const=DEFAULT_LOG_FILE, default=None,
                    help=f"Also log to a file (default path: {DEFAULT_LOG_FILE})")
    args = ap.parse_args(argv)

    configure_logging(args.log_level, log_file=args.log_file)

    yours = load_ranked_list(args.yours)
    theirs = load_ranked_list(args.theirs)
    result = compare_lists(yours, theirs)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        print(format_report(result))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
