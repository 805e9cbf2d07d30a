"""
MIT License

TSV/CSV/JSONL helpers for readgff.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, TextIO
import json
import sys

import pandas as pd

FORMATS = ("tsv", "csv", "jsonl")


def write_table(df: pd.DataFrame, path: str | Path, fmt: str = "tsv") -> None:
    """
    Persist a DataFrame in the requested serialization format.

    Parameters
    ----------
    df:
        DataFrame to serialize.
    path:
        Output file path.
    fmt:
        One of ``tsv``, ``csv`` or ``jsonl``.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    if fmt == "tsv":
        df.to_csv(out_path, sep="\t", index=False)
    elif fmt == "csv":
        df.to_csv(out_path, sep=",", index=False)
    elif fmt == "jsonl":
        with out_path.open("w", encoding="utf-8") as handle:
            for record in df.to_dict(orient="records"):
                handle.write(json.dumps(record, default=_json_default) + "\n")
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def _json_default(value):
    # numpy scalars from DataFrame cells
    if hasattr(value, "item"):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_lines(lines: Iterable[str], handle: TextIO | None = None) -> None:
    """Write plain-text lines, one per row, to ``handle`` (stdout by default)."""
    out = handle if handle is not None else sys.stdout
    for line in lines:
        out.write(f"{line}\n")


__all__ = ["write_table", "write_lines", "FORMATS"]
