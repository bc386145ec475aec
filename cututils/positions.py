from typing import Iterator, Sequence, Sized, Tuple, Union, overload

from attr import attrib, attrs, validators

from immutablecollections.converter_utils import _to_tuple

from cututils.preconditions import check_all_isinstance, check_arg, check_non_negative


@attrs(frozen=True, slots=True, repr=False)  # pylint:disable=inherit-non-class
# Pylint disable due to https://github.com/PyCQA/pylint/issues/2472
class Span(Sized):
    """
    A range of zero-based unit offsets.

    Inclusive of `start`, exclusive of `end`. A unit may be a byte, a character, or a field
    depending on what the span is applied to.

    Spans are never empty: `start` must be strictly less than `end`.
    """

    start: int = attrib(validator=validators.instance_of(int))
    end: int = attrib(validator=validators.instance_of(int))

    # noinspection PyUnusedLocal
    @end.validator
    def _validate_end(self, attr, val):  # pylint:disable=unused-argument
        check_non_negative(val, "end offset")

    # noinspection PyUnusedLocal
    @start.validator
    def _validate_start(self, attr, val):  # pylint:disable=unused-argument
        check_non_negative(val, "start offset")
        check_arg(
            self.start < self.end,
            "Start offset must be strictly less than end offset but got [%s,%s)",
            (self.start, self.end),
        )

    @staticmethod
    def from_inclusive_to_exclusive(start_inclusive: int, end_exclusive: int) -> "Span":
        """
        Same as the constructor.

        But the more explicit name increases readability and reduces off-by-one errors.
        """
        return Span(start_inclusive, end_exclusive)

    @staticmethod
    def single(offset: int) -> "Span":
        """
        The span covering only the zero-based *offset*.
        """
        return Span(offset, offset + 1)

    def offsets(self) -> range:
        """
        The offsets covered by this span, in ascending order.
        """
        return range(self.start, self.end)

    def to_clause(self) -> str:
        """
        Render this span in the 1-based clause syntax accepted by `parse_position_list`.
        """
        if len(self) == 1:
            return str(self.end)
        return f"{self.start + 1}-{self.end}"

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self):
        return "[%s:%s)" % (self.start, self.end)


@attrs(frozen=True, slots=True, repr=False)  # pylint:disable=inherit-non-class
class PositionList(Sequence[Span]):
    r"""
    An ordered list of `Span`\ s selecting units from a line.

    Order is significant: it is the order in which selected units are emitted, which is the
    order in which the user wrote the clauses. Spans may overlap or repeat; each repetition
    re-emits what it covers.

    Iterating over a `PositionList` yields its spans. Use `offsets` to walk the individual
    offsets they cover.
    """

    _spans: Tuple[Span, ...] = attrib(converter=_to_tuple)

    def __attrs_post_init__(self) -> None:
        check_arg(self._spans, "A PositionList must contain at least one span")
        check_all_isinstance(self._spans, Span)

    @staticmethod
    def of(*spans: Span) -> "PositionList":
        return PositionList(spans)

    def offsets(self) -> Iterator[int]:
        """
        Every offset covered by this list, span by span in stored order.

        Offsets covered by more than one span are yielded once per covering span.
        """
        for span in self._spans:
            yield from span.offsets()

    @overload
    def __getitem__(self, index: int) -> Span:
        ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Span]:
        ...

    def __getitem__(self, index: Union[int, slice]):
        return self._spans[index]

    def __len__(self) -> int:
        return len(self._spans)

    def __iter__(self) -> Iterator[Span]:
        return iter(self._spans)

    def __str__(self) -> str:
        return ",".join(span.to_clause() for span in self._spans)

    def __repr__(self) -> str:
        return "PositionList(%s)" % ", ".join(repr(span) for span in self._spans)
