# Build an integer transaction DB (plus config and item mapping) from a basket CSV

import argparse
from pathlib import Path

import pandas as pd

from .errors import DataFileError
from .transactions import write_transactions


def load_baskets(input_csv, transaction_col="Transaction", item_col="Item"):
    try:
        df = pd.read_csv(input_csv, low_memory=False)
    except (OSError, pd.errors.ParserError) as e:
        raise DataFileError(f"Can't read basket file, {input_csv}: {e}") from e

    missing = [c for c in (transaction_col, item_col) if c not in df.columns]
    if missing:
        raise DataFileError(f"{input_csv}: missing column(s) {missing} in {list(df.columns)}")

    df = df.dropna(subset=[item_col])
    df[item_col] = df[item_col].astype(str).str.strip()
    df = df[(df[item_col] != "") & (df[item_col].str.upper() != "NONE")]

    sort_cols = ["date_time", transaction_col] if "date_time" in df.columns else [transaction_col]
    df = df.sort_values(sort_cols, kind="stable")

    return (df.groupby(transaction_col, sort=False)[item_col]
              .apply(lambda s: sorted(set(s)))
              .reset_index(name="items"))


def encode_items(baskets):
    """Assign ids by descending basket frequency, ties by label."""
    counts = baskets["items"].explode().value_counts()
    items = (counts.rename_axis("item").reset_index(name="support")
                   .sort_values(["support", "item"], ascending=[False, True], kind="stable")
                   .reset_index(drop=True))
    items.insert(0, "id", range(len(items)))
    return items


def main(input_csv, out_dir, min_support=0.01, max_k=0,
         transaction_col="Transaction", item_col="Item"):
    baskets = load_baskets(input_csv, transaction_col, item_col)
    items = encode_items(baskets)
    ids = dict(zip(items["item"], items["id"]))
    encoded = [sorted(ids[i] for i in b) for b in baskets["items"]]

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    write_transactions(out / "transactions.dat", encoded)
    items.to_csv(out / "items.csv", index=False)
    (out / "fpt.cfg").write_text(
        f"{max_k}\n{min_support}\n{len(items)}\n{len(encoded)}\ntransactions.dat\nresults.csv\n"
    )

    print(f"✅ Baskets: {len(encoded)} | Items: {len(items)}")
    print(f"➡ Saved: {out / 'transactions.dat'}")
    print(f"➡ Config: {out / 'fpt.cfg'}")
    return out / "fpt.cfg"


def cli(argv=None):
    ap = argparse.ArgumentParser(prog="fpt-prep")
    ap.add_argument("--input", default="data/raw/bread_basket.csv")
    ap.add_argument("--out_dir", default="data/processed")
    ap.add_argument("--min_support", type=float, default=0.01)
    ap.add_argument("--max_k", type=int, default=0)
    ap.add_argument("--transaction_col", default="Transaction")
    ap.add_argument("--item_col", default="Item")
    args = ap.parse_args(argv)
    try:
        main(args.input, args.out_dir, args.min_support, args.max_k,
             args.transaction_col, args.item_col)
    except DataFileError as e:
        print(f"⚠️ {e}")
        return e.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(cli())
