"""
Splitting delimited lines into fields and joining selected fields back together.
"""
import csv
import io
from typing import Optional, Sequence, Tuple

from attr import attrib, attrs, validators

from typing_extensions import Protocol

TAB = "\t"


class RecordDecodeError(ValueError):
    """
    A line could not be decoded as a delimited record.
    """


class RecordCodec(Protocol):
    """
    Turns a line into a sequence of fields and a sequence of fields back into a line.

    Neither direction deals with line terminators.
    """

    def decode(self, line: str) -> Sequence[str]:
        ...

    def encode(self, fields: Sequence[str]) -> str:
        ...


def parse_delimiter(value: str) -> str:
    """
    Check *value* is usable as a field delimiter and return it.

    Delimiters must be a single byte, which for UTF-8 text means a single ASCII character.
    """
    if not isinstance(value, str) or len(value.encode("utf-8")) != 1:
        raise ValueError(f'--delim "{value}" must be a single byte')
    return value


def _opt_delimiter(value: Optional[str]) -> Optional[str]:
    return None if value is None else parse_delimiter(value)


@attrs(frozen=True, slots=True)
class DelimitedRecordCodec(RecordCodec):
    """
    A `RecordCodec` for CSV-style delimited text.

    Fields may be quoted with ``"`` so that they can contain the delimiter; quoting is only
    added on output when a field needs it.  *output_delimiter* defaults to *delimiter*.
    """

    delimiter: str = attrib(default=TAB, converter=parse_delimiter)
    _output_delimiter: Optional[str] = attrib(
        default=None, converter=_opt_delimiter, kw_only=True
    )

    @property
    def output_delimiter(self) -> str:
        if self._output_delimiter is not None:
            return self._output_delimiter
        return self.delimiter

    def decode(self, line: str) -> Tuple[str, ...]:
        # an empty line would otherwise decode to no fields at all
        if not line:
            return ("",)
        try:
            rows = list(csv.reader([line], delimiter=self.delimiter, strict=True))
        except csv.Error as e:
            raise RecordDecodeError(f"Cannot decode record {line!r}: {e}") from e
        if len(rows) != 1:
            raise RecordDecodeError(
                f"Expected {line!r} to decode as a single record but got {len(rows)}"
            )
        return tuple(rows[0])

    def encode(self, fields: Sequence[str]) -> str:
        # csv would write a lone empty field as ""
        if len(fields) == 1 and not fields[0]:
            return ""
        buffer = io.StringIO()
        csv.writer(
            buffer,
            delimiter=self.output_delimiter,
            lineterminator="",
            quoting=csv.QUOTE_MINIMAL,
        ).writerow(fields)
        return buffer.getvalue()
