import sys
import unittest
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from pydantic import ValidationError

from batchcensor.core.timecode import Pos, Range
from batchcensor.errors import SampleRangeError


class TestPos(unittest.TestCase):
    def test_parse_fields(self):
        self.assertEqual(Pos.parse(".123"), Pos(milliseconds=123))
        self.assertEqual(Pos.parse("42.123"), Pos(seconds=42, milliseconds=123))
        self.assertEqual(Pos.parse("21:42.123"), Pos(minutes=21, seconds=42, milliseconds=123))
        self.assertEqual(
            Pos.parse("12:21:42.123"),
            Pos(hours=12, minutes=21, seconds=42, milliseconds=123),
        )

    def test_parse_rejects(self):
        for text in ("", "42", "1:2:3:4.000", "a.123", "1.-5", "-1.000", "1:x:2.000"):
            with self.subTest(text=text):
                self.assertIsNone(Pos.parse(text))

    def test_as_samples(self):
        rate = 48000
        for h, m, s, ms in [(0, 0, 0, 0), (0, 0, 1, 500), (0, 2, 3, 999), (1, 0, 0, 1)]:
            with self.subTest(pos=(h, m, s, ms)):
                pos = Pos.parse(f"{h}:{m}:{s}.{ms}")
                expected = (h * 3600 + m * 60 + s) * rate + ms * (rate // 1000)
                self.assertEqual(pos.as_samples(rate), expected)

    def test_half_second_at_44100(self):
        self.assertEqual(Pos.parse("0.500").as_samples(44100), 22050)

    def test_as_samples_overflow(self):
        self.assertIsNone(Pos(hours=1000).as_samples(48000))
        self.assertIsNone(Pos(seconds=2 ** 32).as_samples(1))

    def test_ordering(self):
        self.assertLess(Pos.parse("59.999"), Pos.parse("1:00.000"))
        self.assertLess(Pos.parse("1:00.000"), Pos.parse("1:00:00.000"))

    def test_str(self):
        self.assertEqual(str(Pos.parse("1.5")), "01.005")
        self.assertEqual(str(Pos.parse("3:04.010")), "03:04.010")
        self.assertEqual(str(Pos.parse("1:02:03.004")), "01:02:03.004")

    def test_validate_from_text(self):
        self.assertEqual(Pos.model_validate("1:02.500"), Pos(minutes=1, seconds=2, milliseconds=500))
        with self.assertRaises(ValidationError):
            Pos.model_validate("bogus")


class TestRange(unittest.TestCase):
    def test_open_range(self):
        r = Range.parse("^-$")
        self.assertIsNone(r.start)
        self.assertIsNone(r.end)
        for total in (0, 1, 44100):
            self.assertEqual(r.resolve(44100, 1, total), (0, total))

    def test_parse(self):
        r = Range.parse("01.123-$")
        self.assertEqual(r.start, Pos(seconds=1, milliseconds=123))
        self.assertIsNone(r.end)
        self.assertEqual(str(r), "01.123-$")

        r = Range.parse("^-1:00.000")
        self.assertIsNone(r.start)
        self.assertEqual(r.end, Pos(minutes=1))

    def test_parse_rejects(self):
        for text in ("", "1.000", "1.000-", "-1.000", "x-$", "^-^"):
            with self.subTest(text=text):
                self.assertIsNone(Range.parse(text))

    def test_resolve_interleaved(self):
        r = Range.parse("0.500-1.000")
        self.assertEqual(r.resolve(1000, 2, 4000), (1000, 2000))

    def test_resolve_clamps_end(self):
        r = Range.parse("0.500-10.000")
        self.assertEqual(r.resolve(1000, 1, 800), (500, 800))

    def test_resolve_start_out_of_range(self):
        with self.assertRaises(SampleRangeError):
            Range.parse("2.000-$").resolve(1000, 1, 1000)

    def test_resolve_start_after_end(self):
        with self.assertRaises(SampleRangeError):
            Range.parse("0.800-0.200").resolve(1000, 1, 1000)

    def test_resolve_overflow(self):
        with self.assertRaises(SampleRangeError):
            Range.parse("1000:00:00.000-$").resolve(48000, 1, 100)


if __name__ == "__main__":
    unittest.main()
