r"""
Parsing of cut-style selection lists such as ``1,3-5,9``.

A selection list is a comma-separated list of clauses.  Each clause is either a single
1-based position ``N`` or an inclusive 1-based range ``N1-N2`` with ``N1 < N2``.
Parsing turns it into a `PositionList` of zero-based half-open `Span`\ s which keeps the
clauses in the order the user wrote them, duplicates and overlaps included.
"""
import logging
import re

from cututils.positions import PositionList, Span

log = logging.getLogger(__name__)  # pylint:disable=invalid-name

# ASCII digits only; \d would also accept other Unicode digits
_POSITION_REGEX = re.compile(r"[0-9]+")
_RANGE_REGEX = re.compile(r"([0-9]+)-([0-9]+)")


class PositionListError(ValueError):
    """
    A selection list could not be parsed.

    The string form of the exception is a message suitable for showing to users.
    """


class IllegalListValue(PositionListError):
    """
    A clause is neither a positive number nor a well-formed range of positive numbers.
    """

    def __init__(self, value: str) -> None:
        super().__init__(f'illegal list value: "{value}"')
        self.value = value


class RangeOrderError(PositionListError):
    """
    The first number of a range clause is not lower than the second.

    *first* and *second* are the 1-based numbers as the user wrote them.
    """

    def __init__(self, first: int, second: int) -> None:
        super().__init__(
            f"first number in range ({first}) must be lower than the second number ({second})"
        )
        self.first = first
        self.second = second


def parse_position_list(spec: str) -> PositionList:
    """
    Parse a selection list into a `PositionList`.

    Clauses are validated left to right and the first bad one raises: an
    `IllegalListValue` for anything other than a positive number or a ``N1-N2`` range of
    positive numbers, or a `RangeOrderError` for a range whose first number is not lower
    than its second.

    The result is neither sorted nor deduplicated: ``parse_position_list("3,1,1")`` selects
    the third unit followed by the first unit twice.
    """
    if not isinstance(spec, str):
        raise TypeError(f"Expected a selection list string but got {spec!r}")
    ret = PositionList(_parse_clause(clause) for clause in spec.split(","))
    log.debug("Parsed selection list %r as %r", spec, ret)
    return ret


def _parse_clause(clause: str) -> Span:
    if _POSITION_REGEX.fullmatch(clause):
        return Span.single(_parse_index(clause, clause))

    range_match = _RANGE_REGEX.fullmatch(clause)
    if range_match is None:
        raise IllegalListValue(clause)

    first_index = _parse_index(range_match.group(1), clause)
    second_index = _parse_index(range_match.group(2), clause)
    if first_index >= second_index:
        raise RangeOrderError(first_index + 1, second_index + 1)
    return Span(first_index, second_index + 1)


def _parse_index(number: str, clause: str) -> int:
    """
    Convert a 1-based position to a zero-based index.

    *clause* is the full clause *number* came from, used in the error message.
    """
    position = int(number)
    if position < 1:
        raise IllegalListValue(clause)
    return position - 1
