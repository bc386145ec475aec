from unittest import TestCase

from cututils.positions import PositionList, Span


class TestSpan(TestCase):
    def test_basics(self):
        span = Span(2, 5)
        self.assertEqual(3, len(span))
        self.assertEqual([2, 3, 4], list(span.offsets()))
        self.assertEqual("[2:5)", repr(span))

    def test_constructors(self):
        self.assertEqual(Span(2, 5), Span.from_inclusive_to_exclusive(2, 5))
        self.assertEqual(Span(4, 5), Span.single(4))

    def test_must_be_non_empty(self):
        with self.assertRaisesRegex(
            ValueError, r"Start offset must be strictly less than end offset"
        ):
            Span(3, 3)
        with self.assertRaises(ValueError):
            Span(5, 2)

    def test_must_be_non_negative(self):
        with self.assertRaisesRegex(ValueError, "non-negative"):
            Span(-1, 2)

    def test_must_be_ints(self):
        with self.assertRaises(TypeError):
            Span("1", 2)  # type: ignore
        with self.assertRaises(TypeError):
            Span(True, 2)
        with self.assertRaises(TypeError):
            Span(0, True)

    def test_to_clause(self):
        self.assertEqual("1", Span(0, 1).to_clause())
        self.assertEqual("3-5", Span(2, 5).to_clause())

    def test_hashable(self):
        self.assertEqual(1, len({Span(0, 1), Span(0, 1)}))


class TestPositionList(TestCase):
    def test_sequence_behavior(self):
        positions = PositionList.of(Span(2, 3), Span(0, 1), Span(0, 1))
        self.assertEqual(3, len(positions))
        self.assertEqual(Span(2, 3), positions[0])
        self.assertEqual([Span(2, 3), Span(0, 1), Span(0, 1)], list(positions))
        self.assertIn(Span(0, 1), positions)
        self.assertEqual(2, positions.count(Span(0, 1)))

    def test_equality_is_order_sensitive(self):
        self.assertEqual(
            PositionList([Span(0, 1), Span(2, 3)]), PositionList.of(Span(0, 1), Span(2, 3))
        )
        self.assertNotEqual(
            PositionList.of(Span(2, 3), Span(0, 1)), PositionList.of(Span(0, 1), Span(2, 3))
        )

    def test_offsets_walk(self):
        positions = PositionList.of(Span(3, 5), Span(0, 2), Span(1, 2))
        self.assertEqual([3, 4, 0, 1, 1], list(positions.offsets()))

    def test_must_be_non_empty(self):
        with self.assertRaisesRegex(ValueError, "at least one span"):
            PositionList([])

    def test_must_contain_spans(self):
        with self.assertRaises(TypeError):
            PositionList([(0, 1)])  # type: ignore

    def test_str(self):
        self.assertEqual("3,1-2,2", str(PositionList.of(Span(2, 3), Span(0, 2), Span(1, 2))))
