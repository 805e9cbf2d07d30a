"""
MIT License

GFF parsing utilities: line parser, attribute parser and record stream.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Dict, Iterable, Iterator, Optional, Union
import logging
import re

LOGGER = logging.getLogger(__name__)

EXPECTED_FIELDS = 9
FASTA_DIRECTIVE = "##FASTA"
MISSING = "."
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

GFFSource = Union[str, Path, IO[str], IO[bytes], Iterable[str]]


class GFFError(Exception):
    """Base class for GFF parsing errors."""


class SourceUnavailable(GFFError, OSError):
    """Raised when a GFF source cannot be opened."""

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = str(path)
        message = f"Cannot open file: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class MalformedLine(GFFError):
    """Raised when a line does not split into the expected number of columns."""

    def __init__(self, actual_fields: int, expected_fields: int = EXPECTED_FIELDS) -> None:
        self.expected_fields = expected_fields
        self.actual_fields = actual_fields
        super().__init__(f"Invalid GFF line: expected {expected_fields} fields, got {actual_fields}")


class InvalidCoordinate(GFFError):
    """Raised when the start or stop column is not an integer."""

    def __init__(self, field: str, raw_value: str) -> None:
        self.field = field
        self.raw_value = raw_value
        label = "start" if field == "start" else "end"
        super().__init__(f"Invalid {label} position: {raw_value}")


class InvalidEncoding(GFFError):
    """Raised when a line cannot be decoded with the reader's encoding."""

    def __init__(self, encoding: str, reason: str) -> None:
        self.encoding = encoding
        self.reason = reason
        super().__init__(f"Line is not valid {encoding}: {reason}")


class LineParseError(GFFError):
    """A line-level failure annotated with its 1-based line number."""

    def __init__(self, line_number: int, failure: GFFError) -> None:
        self.line_number = line_number
        self.failure = failure
        super().__init__(f"Error at line {line_number}: {failure}")


@dataclass(frozen=True)
class GFFRecord:
    """Representation of a single GFF record.

    ``attributes`` keeps column 9 verbatim; use :meth:`attribute_map` or
    :meth:`get_attribute` to decode it.
    """

    seqid: str
    source: str
    feature_type: str
    start: int
    stop: int
    score: str
    strand: str
    phase: str
    attributes: str

    @property
    def length(self) -> int:
        """Inclusive interval length, clamped at zero."""
        return max(0, self.stop - self.start + 1)

    def attribute_map(self) -> Dict[str, str]:
        return parse_attributes(self.attributes)

    def get_attribute(self, key: str, default: str = "") -> str:
        return get_attribute(self, key, default)

    def to_line(self) -> str:
        return "\t".join(
            [
                self.seqid,
                self.source,
                self.feature_type,
                str(self.start),
                str(self.stop),
                self.score,
                self.strand,
                self.phase,
                self.attributes,
            ]
        )

    def __str__(self) -> str:
        return self.to_line()


def parse_attributes(field: str) -> Dict[str, str]:
    """
    Decode the attribute column into an ordered mapping.

    Pairs are separated by ``;`` and split on the first ``=``. Bare keys map
    to an empty string and later duplicates overwrite earlier ones. ``"."``
    or an empty column yields an empty mapping.
    """
    out: Dict[str, str] = {}
    if field == MISSING or not field:
        return out
    for chunk in field.split(";"):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, sep, value = chunk.partition("=")
        if sep:
            out[key.strip()] = value.strip()
        else:
            out[chunk] = ""
    return out


def get_attribute(record: GFFRecord, key: str, default: str = "") -> str:
    """
    Look up one attribute of ``record``.

    The attribute column is parsed again on every call; callers doing many
    lookups on the same record should keep the result of
    :func:`parse_attributes` instead.
    """
    return parse_attributes(record.attributes).get(key, default)


def _first_char(value: str) -> str:
    return value[0] if value else MISSING


def _parse_coordinate(field: str, value: str) -> int:
    if not _INTEGER_RE.fullmatch(value):
        raise InvalidCoordinate(field, value)
    return int(value)


def parse_line(line: str) -> GFFRecord:
    """
    Parse one trimmed, non-comment GFF line.

    Raises :class:`MalformedLine` when the line does not have exactly nine
    tab-separated columns and :class:`InvalidCoordinate` when start or stop
    is not a base-10 integer.
    """
    parts = line.split("\t")
    if len(parts) != EXPECTED_FIELDS:
        raise MalformedLine(len(parts))
    seqid, source, ftype, start, stop, score, strand, phase, attrs = parts
    return GFFRecord(
        seqid=seqid,
        source=source,
        feature_type=ftype,
        start=_parse_coordinate("start", start),
        stop=_parse_coordinate("stop", stop),
        score=score,
        strand=_first_char(strand),
        phase=_first_char(phase),
        attributes=attrs,
    )


class GFFReader:
    """
    Single-pass iterator over the records of a GFF source.

    ``source`` is either a path, which is opened immediately and owned by the
    reader, or an already-open handle (any iterable of lines), which is left
    open. Iteration stops at a ``##FASTA`` line. The owned handle is released
    when iteration ends, on error, or on :meth:`close`.
    """

    def __init__(self, source: GFFSource, encoding: str = "utf-8") -> None:
        self.name: Optional[str] = None
        self._owns_handle = False
        self._iterator: Optional[Iterator[GFFRecord]] = None
        self.encoding = encoding
        if isinstance(source, (str, Path)):
            self.name = str(source)
            try:
                self._handle = Path(source).open("rb")
            except OSError as exc:
                raise SourceUnavailable(source, exc.strerror or "") from exc
            self._owns_handle = True
        else:
            self._handle = source
            self.name = getattr(source, "name", None)
        self.line_number = 0

    def __iter__(self) -> Iterator[GFFRecord]:
        if self._iterator is None:
            self._iterator = self._records()
        return self._iterator

    def __next__(self) -> GFFRecord:
        return next(iter(self))

    def __enter__(self) -> "GFFReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying handle if the reader opened it."""
        if self._iterator is not None:
            self._iterator.close()
        if self._owns_handle and not self._handle.closed:
            self._handle.close()

    def _records(self) -> Iterator[GFFRecord]:
        try:
            for raw in self._handle:
                self.line_number += 1
                if isinstance(raw, bytes):
                    try:
                        raw = raw.decode(self.encoding)
                    except UnicodeDecodeError as exc:
                        raise LineParseError(self.line_number, InvalidEncoding(self.encoding, exc.reason)) from exc
                line = raw.strip()
                if line == FASTA_DIRECTIVE:
                    LOGGER.debug("Reached %s at line %d; stopping", FASTA_DIRECTIVE, self.line_number)
                    return
                if not line or line.startswith("#"):
                    continue
                try:
                    record = parse_line(line)
                except GFFError as exc:
                    raise LineParseError(self.line_number, exc) from exc
                yield record
        finally:
            if self._owns_handle:
                self._handle.close()


def read_gff(source: GFFSource) -> Iterator[GFFRecord]:
    """Yield GFF records from a path or an open handle.

    The source is opened before this returns, so a missing path raises
    :class:`SourceUnavailable` at the call.
    """
    return _drain(GFFReader(source))


def _drain(reader: GFFReader) -> Iterator[GFFRecord]:
    with reader:
        yield from reader


__all__ = [
    "GFFError",
    "SourceUnavailable",
    "MalformedLine",
    "InvalidCoordinate",
    "InvalidEncoding",
    "LineParseError",
    "GFFRecord",
    "GFFReader",
    "parse_attributes",
    "get_attribute",
    "parse_line",
    "read_gff",
    "EXPECTED_FIELDS",
    "FASTA_DIRECTIVE",
]
