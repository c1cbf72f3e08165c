import types
import unittest

from featalign._cigar import MalformedEncodingError, cigar_to_lens, parse_cigar
from featalign._constants import OP_DELETION, OP_INSERTION, OP_MATCH, OP_OTHER


class CigarTests(unittest.TestCase):
    def test_parse_cigar(self):
        exp = [(5, OP_MATCH), (3, OP_DELETION), (5, OP_MATCH)]
        self.assertEqual(list(parse_cigar('5M3D5M')), exp)

    def test_parse_cigar_kinds(self):
        exp = [(2, OP_OTHER), (3, OP_MATCH), (4, OP_MATCH), (1, OP_INSERTION),
               (6, OP_OTHER), (7, OP_MATCH), (8, OP_OTHER), (9, OP_OTHER)]
        self.assertEqual(list(parse_cigar('2S3=4X1I6N7M8H9P')), exp)

    def test_parse_cigar_is_lazy(self):
        obs = parse_cigar('150M')
        self.assertIsInstance(obs, types.GeneratorType)
        self.assertEqual(next(obs), (150, OP_MATCH))
        with self.assertRaises(StopIteration):
            next(obs)

    def test_parse_cigar_trailing_content(self):
        self.assertEqual(list(parse_cigar('5M3')), [(5, OP_MATCH)])
        self.assertEqual(list(parse_cigar('5M2Ifoo')),
                         [(5, OP_MATCH), (2, OP_INSERTION)])

    def test_parse_cigar_empty(self):
        self.assertEqual(list(parse_cigar('')), [])

    def test_parse_cigar_malformed(self):
        with self.assertRaises(MalformedEncodingError):
            list(parse_cigar('foo'))
        with self.assertRaises(MalformedEncodingError):
            list(parse_cigar('MID'))
        # still a ValueError for callers which do not care about the detail
        with self.assertRaises(ValueError):
            list(parse_cigar('12'))

    def test_cigar_to_lens(self):
        self.assertEqual(cigar_to_lens('150M'), (150, 150))
        self.assertEqual(cigar_to_lens('3M1I3M1D5M'), (12, 12))
        self.assertEqual(cigar_to_lens('3M4I3M'), (10, 6))
        self.assertEqual(cigar_to_lens('5S10M2N'), (10, 10))


if __name__ == '__main__':
    unittest.main()
