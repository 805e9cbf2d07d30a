"""
MIT License

Coverage statistics: per-type totals and unique (merged) base coverage.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from ..io.gff import GFFRecord

Interval = Tuple[int, int]


def interval_length(start: int, stop: int) -> int:
    """Length of an inclusive interval, never negative."""
    return max(0, stop - start + 1)


def unique_coverage(intervals: Iterable[Interval]) -> int:
    """
    Count the positions covered by at least one inclusive interval.

    Intervals are sorted by start and merged in one sweep; touching
    intervals such as ``(1, 5)`` and ``(6, 9)`` merge into one.
    """
    ordered = sorted(intervals, key=lambda pair: pair[0])
    if not ordered:
        return 0

    cur_start, cur_end = ordered[0]
    total = 0
    for start, end in ordered[1:]:
        if start <= cur_end + 1:
            if end > cur_end:
                cur_end = end
        else:
            total += interval_length(cur_start, cur_end)
            cur_start, cur_end = start, end
    total += interval_length(cur_start, cur_end)
    return total


@dataclass
class TypeStats:
    count: int = 0
    bases: int = 0


@dataclass
class CoverageSummary:
    total_records: int
    total_bases: int
    unique_bases: int
    by_type: Dict[str, TypeStats]
    unique_by_seqid: Dict[str, int]

    def type_table(self) -> pd.DataFrame:
        """Per feature type counts and summed lengths, sorted by type."""
        types = sorted(self.by_type)
        counts = np.array([self.by_type[name].count for name in types], dtype=np.int64)
        bases = np.array([self.by_type[name].bases for name in types], dtype=np.int64)
        mean = np.divide(bases, counts, out=np.zeros(len(types)), where=counts > 0)
        return pd.DataFrame(
            {
                "feature_type": types,
                "n_records": counts,
                "total_bp": bases,
                "mean_len": np.round(mean, 3),
            }
        )

    def seqid_table(self, lengths: Optional[Mapping[str, int]] = None) -> pd.DataFrame:
        """
        Unique coverage per sequence id.

        With ``lengths`` (sequence id -> sequence length) a
        ``fraction_covered`` column is added; it is NaN for unknown ids.
        """
        seqids = sorted(self.unique_by_seqid)
        unique = np.array([self.unique_by_seqid[name] for name in seqids], dtype=np.int64)
        table = pd.DataFrame({"seqid": seqids, "unique_bp": unique})
        if lengths is not None:
            seq_len = np.array([lengths.get(name, 0) for name in seqids], dtype=np.int64)
            fraction = np.full(len(seqids), np.nan)
            np.divide(unique, seq_len, out=fraction, where=seq_len > 0)
            table["seq_length"] = seq_len
            table["fraction_covered"] = np.round(fraction, 6)
        return table


@dataclass
class CoverageAccumulator:
    """Collects per-run state for one statistics pass."""

    total_records: int = 0
    total_bases: int = 0
    intervals: Dict[str, List[Interval]] = field(default_factory=lambda: defaultdict(list))
    by_type: Dict[str, TypeStats] = field(default_factory=dict)

    def add(self, record: GFFRecord) -> None:
        length = interval_length(record.start, record.stop)
        self.total_records += 1
        self.total_bases += length
        self.intervals[record.seqid].append((record.start, record.stop))
        stats = self.by_type.setdefault(record.feature_type, TypeStats())
        stats.count += 1
        stats.bases += length

    def update(self, records: Iterable[GFFRecord]) -> "CoverageAccumulator":
        for record in records:
            self.add(record)
        return self

    def summary(self) -> CoverageSummary:
        unique_by_seqid = {seqid: unique_coverage(pairs) for seqid, pairs in self.intervals.items()}
        return CoverageSummary(
            total_records=self.total_records,
            total_bases=self.total_bases,
            unique_bases=sum(unique_by_seqid.values()),
            by_type={name: TypeStats(s.count, s.bases) for name, s in self.by_type.items()},
            unique_by_seqid=unique_by_seqid,
        )


def summarize(records: Iterable[GFFRecord]) -> CoverageSummary:
    """Single pass over ``records`` (a stream or a dataset)."""
    return CoverageAccumulator().update(records).summary()


def format_summary(summary: CoverageSummary) -> List[str]:
    """Render the plain-text statistics report."""
    lines = [
        f"Total records: {summary.total_records}",
        f"Total bases covered: {summary.total_bases}",
        f"Total unique bases covered: {summary.unique_bases}",
    ]
    if summary.by_type:
        lines.extend(["", "Per feature type:", "Type\tRecords\tBases"])
        for name in sorted(summary.by_type):
            entry = summary.by_type[name]
            lines.append(f"{name}\t{entry.count}\t{entry.bases}")
    return lines


__all__ = [
    "Interval",
    "interval_length",
    "unique_coverage",
    "TypeStats",
    "CoverageSummary",
    "CoverageAccumulator",
    "summarize",
    "format_summary",
]
