from typing import Dict
from rich.table import Table
from .quotes import QuoteSnapshot
import pandas as pd
import numpy as np


def ladder_to_dataframe(
    snapshot: QuoteSnapshot
) -> pd.DataFrame:
    """
    Flatten the bid/ask ladders of a quote into a pandas DataFrame.

    Rows keep the snapshot order (ascending price on each side): all bids
    first, then all asks. ``level`` is the zero-based position within its
    side.

    Parameters
    ----------
    snapshot : QuoteSnapshot
        Normalized quote.

    Returns
    -------
    pandas.DataFrame
        Columns ``['side', 'level', 'price', 'size']`` with float prices and
        sizes.
    """
    rows = [
        {"side": side, "level": i, "price": lvl.price, "size": lvl.size}
        for side, levels in (("bid", snapshot.bids), ("ask", snapshot.asks))
        for i, lvl in enumerate(levels)
    ]

    df = pd.DataFrame(rows, columns=["side", "level", "price", "size"])

    return df.astype({
        "side": "object",
        "level": "int64",
        "price": "float64",
        "size": "float64",
    })


def summarize_ladder(
    snapshot: QuoteSnapshot
) -> Dict[str, float]:
    """
    Best bid/ask, mid and spread of a quote.

    Levels with a zero price (the placeholder the API sends for an empty
    book) are ignored. Missing values are reported as ``numpy.nan``.
    """
    bids = np.array(
        [lvl.price for lvl in snapshot.bids if lvl.price], dtype="float64"
    )
    asks = np.array(
        [lvl.price for lvl in snapshot.asks if lvl.price], dtype="float64"
    )

    best_bid = bids.max() if bids.size else np.nan
    best_ask = asks.min() if asks.size else np.nan

    return {
        "best_bid": float(best_bid),
        "best_ask": float(best_ask),
        "mid": float((best_bid + best_ask) / 2),
        "spread": float(best_ask - best_bid),
    }


def ladder_table(
    snapshot: QuoteSnapshot
) -> Table:
    """Render both ladders side by side as a rich Table."""
    title = snapshot.long_ticker or snapshot.short_ticker or "quote"
    table = Table(title=title)
    table.add_column("Bid size", justify="right")
    table.add_column("Bid", justify="right", style="green")
    table.add_column("Ask", justify="right", style="red")
    table.add_column("Ask size", justify="right")

    # Best prices on the first row: bids descending, asks ascending.
    bids = [lvl for lvl in reversed(snapshot.bids) if lvl.price is not None]
    asks = [lvl for lvl in snapshot.asks if lvl.price is not None]
    for i in range(max(len(bids), len(asks))):
        bid = bids[i] if i < len(bids) else None
        ask = asks[i] if i < len(asks) else None
        table.add_row(
            "" if bid is None else str(bid.size),
            "" if bid is None else str(bid.price),
            "" if ask is None else str(ask.price),
            "" if ask is None else str(ask.size),
        )

    return table
