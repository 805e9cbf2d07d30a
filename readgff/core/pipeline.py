"""
MIT License

High-level orchestration for the select and stats commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional

import pandas as pd

from .coverage import CoverageSummary, summarize
from .filters import RecordFilter, select_records
from ..io.fasta import read_embedded_fasta, sequence_lengths
from ..io.gff import GFFRecord, read_gff
from ..util.logging import get_logger

LOGGER = get_logger()


@dataclass
class StatsConfig:
    gff: str
    by_seqid: bool = False
    fasta: Optional[str] = None
    record_filter: Optional[RecordFilter] = None


@dataclass
class StatsResult:
    config: StatsConfig
    summary: CoverageSummary
    seq_lengths: Dict[str, int]

    def table(self) -> pd.DataFrame:
        if self.config.by_seqid:
            return self.summary.seqid_table(self.seq_lengths or None)
        return self.summary.type_table()


def run_select(gff: str | Path, record_filter: RecordFilter) -> Iterator[GFFRecord]:
    """Stream the records of ``gff`` accepted by ``record_filter``."""
    return select_records(read_gff(gff), record_filter)


def run_stats(config: StatsConfig) -> StatsResult:
    """Compute coverage statistics for one GFF file in a single streaming pass."""

    LOGGER.info("Computing statistics for %s", config.gff)
    records = read_gff(config.gff)
    if config.record_filter is not None and not config.record_filter.is_empty():
        records = select_records(records, config.record_filter)
    summary = summarize(records)

    seq_lengths: Dict[str, int] = {}
    if config.by_seqid:
        if config.fasta:
            seq_lengths = sequence_lengths(config.fasta)
        else:
            seq_lengths = read_embedded_fasta(config.gff)
        if seq_lengths:
            LOGGER.info("Using lengths for %d sequences", len(seq_lengths))

    return StatsResult(config=config, summary=summary, seq_lengths=seq_lengths)


__all__ = ["StatsConfig", "StatsResult", "run_select", "run_stats"]
