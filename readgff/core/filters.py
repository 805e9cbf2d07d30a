"""
MIT License

Record selection predicates shared by the CLI and dataset loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..io.gff import GFFRecord


@dataclass
class RecordFilter:
    """Selection criteria; unset fields do not restrict."""

    feature_type: Optional[str] = None
    seqid: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    def __call__(self, record: GFFRecord) -> bool:
        if self.feature_type and record.feature_type != self.feature_type:
            return False
        if self.seqid and record.seqid != self.seqid:
            return False
        length = record.length
        if self.min_length is not None and length < self.min_length:
            return False
        if self.max_length is not None and length > self.max_length:
            return False
        return True

    def is_empty(self) -> bool:
        return not (
            self.feature_type
            or self.seqid
            or self.min_length is not None
            or self.max_length is not None
        )


def parse_optional_int(value: str | None, option_name: str) -> Optional[int]:
    """Parse an optional integer CLI value; empty means unset."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid value '{value}' supplied for {option_name}.") from None


def select_records(records: Iterable[GFFRecord], record_filter: RecordFilter) -> Iterator[GFFRecord]:
    for record in records:
        if record_filter(record):
            yield record


__all__ = ["RecordFilter", "parse_optional_int", "select_records"]
