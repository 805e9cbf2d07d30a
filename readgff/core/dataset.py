"""
MIT License

In-memory GFF dataset with lookups by sequence id and feature type.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from ..io.gff import GFFRecord, GFFSource, parse_attributes, read_gff
from ..util.logging import get_logger

LOGGER = get_logger()

RecordPredicate = Callable[[GFFRecord], bool]

FRAME_COLUMNS = [
    "seqid",
    "source",
    "feature_type",
    "start",
    "stop",
    "score",
    "strand",
    "phase",
    "attributes",
    "length",
]


class GFFDataset:
    """
    Records of one GFF source plus positional indexes.

    The record tuple is fixed at construction; ``_by_seqid`` and
    ``_by_type`` hold positions into it, each record listed once under its
    own seqid and feature type.
    """

    def __init__(self, records: Iterable[GFFRecord]) -> None:
        self._records: Tuple[GFFRecord, ...] = tuple(records)
        by_seqid: Dict[str, List[int]] = defaultdict(list)
        by_type: Dict[str, List[int]] = defaultdict(list)
        for pos, record in enumerate(self._records):
            by_seqid[record.seqid].append(pos)
            by_type[record.feature_type].append(pos)
        self._by_seqid = {key: tuple(val) for key, val in by_seqid.items()}
        self._by_type = {key: tuple(val) for key, val in by_type.items()}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GFFRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> GFFRecord:
        return self._records[index]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(records={len(self._records)}, "
            f"seqids={len(self._by_seqid)}, feature_types={len(self._by_type)})"
        )

    @property
    def records(self) -> Tuple[GFFRecord, ...]:
        return self._records

    @property
    def seqids(self) -> List[str]:
        """Sequence ids in order of first appearance."""
        return list(self._by_seqid)

    @property
    def feature_types(self) -> List[str]:
        """Feature types in order of first appearance."""
        return list(self._by_type)

    def records_by_seqid(self, seqid: str) -> List[GFFRecord]:
        return [self._records[pos] for pos in self._by_seqid.get(seqid, ())]

    def records_by_feature_type(self, feature_type: str) -> List[GFFRecord]:
        return [self._records[pos] for pos in self._by_type.get(feature_type, ())]

    def overlapping(self, seqid: str, start: int, stop: int) -> List[GFFRecord]:
        """Records on ``seqid`` intersecting the inclusive range ``[start, stop]``."""
        return [
            record
            for record in self.records_by_seqid(seqid)
            if record.start <= stop and record.stop >= start
        ]

    def children_by_parent(self, feature_type: Optional[str] = None) -> Dict[str, List[str]]:
        """
        Map each ``Parent`` attribute value to the ``ID`` values of its children.

        Only records of ``feature_type`` are considered when it is given.
        Parents are not checked to exist.
        """
        records: Sequence[GFFRecord] = (
            self.records_by_feature_type(feature_type) if feature_type else self._records
        )
        mapping: Dict[str, List[str]] = {}
        for record in records:
            attrs = parse_attributes(record.attributes)
            parent = attrs.get("Parent", "")
            if not parent:
                continue
            mapping.setdefault(parent, []).append(attrs.get("ID", ""))
        return mapping

    def to_frame(self) -> pd.DataFrame:
        """One row per record, in insertion order."""
        rows = [
            {
                "seqid": record.seqid,
                "source": record.source,
                "feature_type": record.feature_type,
                "start": record.start,
                "stop": record.stop,
                "score": record.score,
                "strand": record.strand,
                "phase": record.phase,
                "attributes": record.attributes,
                "length": record.length,
            }
            for record in self._records
        ]
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def _as_set(values: Optional[Iterable[str]]) -> frozenset:
    # a bare string is one key, not a set of characters
    if isinstance(values, str):
        return frozenset([values])
    return frozenset(values or ())


def load_gff(
    source: GFFSource,
    seqids: Optional[Iterable[str]] = None,
    feature_types: Optional[Iterable[str]] = None,
    predicate: Optional[RecordPredicate] = None,
) -> GFFDataset:
    """
    Read a whole GFF source into a :class:`GFFDataset`.

    Empty or missing ``seqids``/``feature_types`` do not restrict. All
    given filters must match for a record to be kept. Parse and open errors
    from the stream propagate unchanged.
    """
    seqid_set = _as_set(seqids)
    type_set = _as_set(feature_types)
    kept: List[GFFRecord] = []
    seen = 0
    for record in read_gff(source):
        seen += 1
        if seqid_set and record.seqid not in seqid_set:
            continue
        if type_set and record.feature_type not in type_set:
            continue
        if predicate is not None and not predicate(record):
            continue
        kept.append(record)
    dataset = GFFDataset(kept)
    LOGGER.info(
        "Loaded %d GFF records (%d filtered out) across %d sequences",
        len(dataset),
        seen - len(dataset),
        len(dataset.seqids),
    )
    return dataset


def records_by_seqid(dataset: Optional[GFFDataset], seqid: str) -> List[GFFRecord]:
    if dataset is None:
        return []
    return dataset.records_by_seqid(seqid)


def records_by_feature_type(dataset: Optional[GFFDataset], feature_type: str) -> List[GFFRecord]:
    if dataset is None:
        return []
    return dataset.records_by_feature_type(feature_type)


__all__ = [
    "GFFDataset",
    "load_gff",
    "records_by_seqid",
    "records_by_feature_type",
    "RecordPredicate",
    "FRAME_COLUMNS",
]
