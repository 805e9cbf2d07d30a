"""
MIT License

Command-line interface for readgff.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.coverage import format_summary
from .core.filters import RecordFilter, parse_optional_int
from .core.pipeline import StatsConfig, run_select, run_stats
from .io.gff import GFFError
from .io.tsv import FORMATS, write_lines, write_table
from .util.logging import get_logger, set_level

LOGGER = get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="readgff", description="Parse and summarise GFF annotation files")
    parser.add_argument("--log-level", default="info", help="Logging level (debug, info, warning, error)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    select_parser = subparsers.add_parser("select", help="Filter records from a GFF file")
    select_parser.set_defaults(handler=run_select_command)
    select_parser.add_argument("gff", help="Input GFF file to filter")
    select_parser.add_argument("-t", "--type", dest="feature_type", default="", help="Only keep records with this feature type")
    select_parser.add_argument("-m", "--min-len", dest="min_len", default="", help="Minimum allowed length for a record")
    select_parser.add_argument("-x", "--max-len", dest="max_len", default="", help="Maximum allowed length for a record")
    select_parser.add_argument("-c", "--contig", default="", help="Only keep records from this contig (seqid)")

    stats_parser = subparsers.add_parser("stats", help="Compute basic statistics from a GFF file")
    stats_parser.set_defaults(handler=run_stats_command)
    stats_parser.add_argument("gff", help="Input GFF file to analyse")
    stats_parser.add_argument("--by-seqid", action="store_true", help="Report unique coverage per sequence id")
    stats_parser.add_argument("--fasta", help="FASTA with sequence lengths (defaults to the GFF's ##FASTA section)")
    stats_parser.add_argument("--table", help="Also write the summary table to this path")
    stats_parser.add_argument("--emit", choices=FORMATS, default="tsv")
    return parser


def build_filter(args: argparse.Namespace) -> RecordFilter:
    return RecordFilter(
        feature_type=args.feature_type or None,
        seqid=args.contig or None,
        min_length=parse_optional_int(args.min_len, "--min-len"),
        max_length=parse_optional_int(args.max_len, "--max-len"),
    )


def run_select_command(args: argparse.Namespace) -> None:
    try:
        record_filter = build_filter(args)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    write_lines(record.to_line() for record in run_select(args.gff, record_filter))


def run_stats_command(args: argparse.Namespace) -> None:
    config = StatsConfig(gff=args.gff, by_seqid=args.by_seqid, fasta=args.fasta)
    result = run_stats(config)
    write_lines(format_summary(result.summary))
    if args.by_seqid:
        table = result.table()
        write_lines(["", "Per sequence id:"])
        table.to_csv(sys.stdout, sep="\t", index=False)
    if args.table:
        write_table(result.table(), Path(args.table), fmt=args.emit)
        LOGGER.info("Table written to %s", args.table)


def dispatch(args: argparse.Namespace) -> None:
    try:
        set_level(args.log_level)
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    try:
        args.handler(args)
    except GFFError as exc:
        raise SystemExit(str(exc)) from exc


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    dispatch(args)


__all__ = ["build_parser", "build_filter", "dispatch", "main"]
