"""
Extraction of selected bytes, characters, or fields from a single line.

All extraction walks a `PositionList` the same way: spans in stored order, offsets within
a span in ascending order, and offsets past the end of the input silently skipped.  Nothing
here fails on data; a line shorter than the selection just yields less output.
"""
from enum import Enum
from typing import Iterator, Sequence, Tuple, TypeVar, Union

from attr import attrib, attrs, validators

from cututils.positions import PositionList

_T = TypeVar("_T")


def select(units: Sequence[_T], positions: PositionList) -> Iterator[_T]:
    """
    Walk *positions* over *units*, yielding each unit covered, in walk order.

    A unit covered by several spans is yielded once per span. Offsets at or beyond
    ``len(units)`` are skipped without error.
    """
    num_units = len(units)
    for span in positions:
        # offsets within a span ascend, so everything past the end is a suffix of the span
        for offset in range(span.start, min(span.end, num_units)):
            yield units[offset]


def extract_bytes(line: Union[str, bytes], positions: PositionList) -> str:
    """
    Select bytes from *line* and decode them as UTF-8.

    A `str` *line* is encoded as UTF-8 before selecting. Selecting by byte offset can split
    a multi-byte character, so decoding replaces ill-formed sequences with U+FFFD rather
    than failing.
    """
    raw = line.encode("utf-8") if isinstance(line, str) else bytes(line)
    return bytes(select(raw, positions)).decode("utf-8", errors="replace")


def extract_chars(line: str, positions: PositionList) -> str:
    """
    Select characters (Unicode code points) from *line*.
    """
    return "".join(select(line, positions))


def extract_fields(record: Sequence[str], positions: PositionList) -> Tuple[str, ...]:
    """
    Select fields from an already-decoded *record*.

    The result is meant to be re-joined by a `RecordCodec`.
    """
    return tuple(select(record, positions))


class SelectionMode(Enum):
    BYTES = "bytes"
    CHARS = "chars"
    FIELDS = "fields"


@attrs(frozen=True, slots=True)
class Selection:
    """
    What to extract from each line: a `SelectionMode` together with its `PositionList`.

    In `SelectionMode.FIELDS` mode `extract` expects a decoded record;
    otherwise it expects the line itself.
    """

    mode: SelectionMode = attrib(validator=validators.instance_of(SelectionMode))
    positions: PositionList = attrib(validator=validators.instance_of(PositionList))

    @staticmethod
    def of_bytes(positions: PositionList) -> "Selection":
        return Selection(SelectionMode.BYTES, positions)

    @staticmethod
    def of_chars(positions: PositionList) -> "Selection":
        return Selection(SelectionMode.CHARS, positions)

    @staticmethod
    def of_fields(positions: PositionList) -> "Selection":
        return Selection(SelectionMode.FIELDS, positions)

    def extract(self, unit):
        if self.mode is SelectionMode.BYTES:
            return extract_bytes(unit, self.positions)
        elif self.mode is SelectionMode.CHARS:
            return extract_chars(unit, self.positions)
        else:
            return extract_fields(unit, self.positions)

    def __str__(self) -> str:
        return f"{self.mode.value} {self.positions}"
