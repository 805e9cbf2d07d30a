"""
MIT License

FASTA helpers for GFF files that carry sequence data after ``##FASTA``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, TextIO
import logging

from Bio import SeqIO

from .gff import FASTA_DIRECTIVE, SourceUnavailable

LOGGER = logging.getLogger(__name__)


def _lengths_from_handle(handle: TextIO) -> Dict[str, int]:
    lengths: Dict[str, int] = {}
    for record in SeqIO.parse(handle, "fasta"):
        seq_id = record.id
        if seq_id in lengths:
            LOGGER.warning("Duplicate FASTA id %s; keeping the first entry", seq_id)
            continue
        lengths[seq_id] = len(record.seq)
    return lengths


def _open(path: str | Path) -> TextIO:
    try:
        return Path(path).open("r", encoding="utf-8")
    except OSError as exc:
        raise SourceUnavailable(path, exc.strerror or "") from exc


def sequence_lengths(path: str | Path) -> Dict[str, int]:
    """Map sequence id -> length for a standalone FASTA file."""
    with _open(path) as handle:
        try:
            return _lengths_from_handle(handle)
        except UnicodeDecodeError as exc:
            raise SourceUnavailable(path, "not valid UTF-8") from exc


def read_embedded_fasta(path: str | Path) -> Dict[str, int]:
    """
    Map sequence id -> length for the FASTA section of a GFF file.

    Returns an empty mapping when the file has no ``##FASTA`` line.
    """
    with _open(path) as handle:
        try:
            for line in handle:
                if line.strip() == FASTA_DIRECTIVE:
                    return _lengths_from_handle(handle)
        except UnicodeDecodeError as exc:
            raise SourceUnavailable(path, "not valid UTF-8") from exc
    LOGGER.debug("No %s section in %s", FASTA_DIRECTIVE, path)
    return {}


__all__ = ["sequence_lengths", "read_embedded_fasta"]
