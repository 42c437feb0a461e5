from dataclasses import fields
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Sequence, Union

import pandas as pd

Number = Union[int, float]


def round_half_up(value: Number, digits: int = 0) -> Number:
    """
    Round half away from zero.

    Returns an int when ``digits`` is 0, a float otherwise.
    """
    quantum = Decimal(1).scaleb(-digits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(rounded)
    return float(rounded)


def safe_rate(numerator: Number, denominator: Number) -> int:
    """Integer percentage, 0 when the denominator is empty."""
    if not denominator:
        return 0
    return round_half_up(numerator / denominator * 100)


def safe_mean(df: pd.DataFrame, col: str) -> int:
    """Rounded column mean, 0 for an empty frame."""
    if df.empty or col not in df.columns:
        return 0
    return round_half_up(float(df[col].mean()))


def _plain(value):
    return value.value if isinstance(value, Enum) else value


def to_frame(records: Sequence, model: type) -> pd.DataFrame:
    """
    Tabular view of typed records.

    Columns always follow the model's fields so empty inputs still
    aggregate cleanly. Enum fields are stored as their plain values.
    Timestamped records gain a ``day`` column.
    """
    columns = [f.name for f in fields(model)]
    df = pd.DataFrame(
        [{name: _plain(getattr(r, name)) for name in columns} for r in records],
        columns=columns,
    )

    if "success" in df.columns:
        df["success"] = df["success"].astype(bool)
    if "generation_time_ms" in df.columns:
        df["generation_time_ms"] = df["generation_time_ms"].astype(float)
    if "created_at" in df.columns:
        df["day"] = [str(ts).split("T")[0] for ts in df["created_at"]]

    return df


__all__ = ["round_half_up", "safe_rate", "safe_mean", "to_frame"]
