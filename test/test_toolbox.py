from autoshort_python_client.toolbox import (
    ladder_table,
    ladder_to_dataframe,
    summarize_ladder,
)
from autoshort_python_client.quotes import QuoteSnapshot
from rich.table import Table
import numpy as np
import pytest


@pytest.fixture
def snapshot():
    return QuoteSnapshot.from_payload([{
        "short_ticker": "YPFD",
        "long_ticker": "YPFD-0003-C-CT-ARS",
        "bids": [{"price": 99, "size": 5}, {"price": 100, "size": 2}],
        "asks": [{"price": 102, "size": 1}, {"price": 101, "size": 3}],
    }])


def test_ladder_to_dataframe(snapshot):
    df = ladder_to_dataframe(snapshot)

    assert list(df.columns) == ["side", "level", "price", "size"]
    assert list(df["side"]) == ["bid", "bid", "ask", "ask"]
    assert list(df["price"]) == [99.0, 100.0, 101.0, 102.0]
    assert list(df["level"]) == [0, 1, 0, 1]
    assert df["price"].dtype == "float64"


def test_ladder_to_dataframe_empty():
    df = ladder_to_dataframe(QuoteSnapshot.from_payload({}))
    assert df.empty
    assert list(df.columns) == ["side", "level", "price", "size"]


def test_summarize_ladder(snapshot):
    summary = summarize_ladder(snapshot)
    assert summary["best_bid"] == 100.0
    assert summary["best_ask"] == 101.0
    assert summary["mid"] == 100.5
    assert summary["spread"] == 1.0


def test_summarize_placeholder_book():
    empty = QuoteSnapshot.from_payload({
        "bids": [{"price": 0, "size": 0}],
        "asks": [{"price": 0, "size": 0}],
    })
    summary = summarize_ladder(empty)
    assert all(np.isnan(v) for v in summary.values())


def test_ladder_table(snapshot):
    table = ladder_table(snapshot)
    assert isinstance(table, Table)
    assert table.title == "YPFD-0003-C-CT-ARS"
    assert table.row_count == 2
    # Best bid and best ask share the first row.
    assert list(table.columns[1].cells)[0] == "100"
    assert list(table.columns[2].cells)[0] == "101"


def test_ladder_table_skips_unpriced_levels():
    snapshot = QuoteSnapshot.from_payload({
        "bids": [{"price": 10, "size": 1}, {"price": None, "size": 0}],
        "asks": [{"price": 11, "size": 2}],
    })
    table = ladder_table(snapshot)
    assert table.row_count == 1
    assert list(table.columns[1].cells) == ["10"]
