#!/usr/bin/python3

"""Test the bedrock.keys module."""

import unittest
from itertools import product

import bedrock.keys
from bedrock import ColumnCoordinate, InvalidIndex
from bedrock.keys import RecordTag


class SurfaceKeyTest(unittest.TestCase):
    """Test encoding and recognising surface keys."""

    COLUMNS = [ColumnCoordinate(x, z) for x, z in product(
        (0, 1, -1, 255, -256, 2**31 - 1, -2**31), repeat=2)]

    def test_layout(self):
        """Test the byte layout of a surface key."""
        key = bedrock.keys.encode_surface_key(ColumnCoordinate(1, -2))
        self.assertEqual(key, b'\x01\x00\x00\x00\xfe\xff\xff\xff\x2d')

    def test_round_trip(self):
        """Test that decoding an encoded key gives back its column."""
        for column in self.COLUMNS:
            with self.subTest(column=column):
                key = bedrock.keys.encode_surface_key(column)
                self.assertEqual(len(key), 9)
                self.assertEqual(bedrock.keys.decode_surface_key(key), column)

    def test_other_tags(self):
        """Test that 9-byte keys with another tag are not surface keys."""
        for tag in RecordTag:
            if tag == RecordTag.DATA_2D:
                continue
            with self.subTest(tag=tag):
                key = b'\x00' * 8 + bytes([tag])
                self.assertIsNone(bedrock.keys.decode_surface_key(key))

    def test_other_lengths(self):
        """Test that keys that are not 9 bytes long are not surface keys."""
        key = bedrock.keys.encode_surface_key(ColumnCoordinate(3, 4))
        for wrong in (b'', key[:8], key + b'\x00', b'~local_player'):
            with self.subTest(key=wrong):
                self.assertIsNone(bedrock.keys.decode_surface_key(wrong))

    def test_out_of_range(self):
        """Test that columns outside the int32 range are rejected."""
        with self.assertRaises(ValueError):
            bedrock.keys.encode_surface_key(ColumnCoordinate(2**31, 0))


class SubChunkKeyTest(unittest.TestCase):
    """Test encoding and recognising sub-chunk keys."""

    def test_layout(self):
        """Test the byte layout of a sub-chunk key."""
        key = bedrock.keys.encode_subchunk_key(ColumnCoordinate(-1, 2), 15)
        self.assertEqual(key, b'\xff\xff\xff\xff\x02\x00\x00\x00\x2f\x0f')

    def test_round_trip(self):
        """Test that decoding an encoded key gives back column and index."""
        for x, z, index in product((0, -5, 70000), (0, 9, -70000), range(16)):
            with self.subTest(x=x, z=z, index=index):
                column = ColumnCoordinate(x, z)
                key = bedrock.keys.encode_subchunk_key(column, index)
                self.assertEqual(len(key), 10)
                self.assertEqual(bedrock.keys.decode_subchunk_key(key),
                                 (column, index))

    def test_invalid_index(self):
        """Test that indices outside 0..15 raise InvalidIndex."""
        for index in (-1, 16, 255, 1.5, '3'):
            with self.subTest(index=index):
                with self.assertRaises(InvalidIndex) as ctx:
                    bedrock.keys.encode_subchunk_key(ColumnCoordinate(0, 0),
                                                     index)
                self.assertEqual(ctx.exception.index, index)

    def test_not_subchunk_keys(self):
        """Test that other keys are not recognised as sub-chunk keys."""
        surface_key = bedrock.keys.encode_surface_key(ColumnCoordinate(0, 0))
        for key in (surface_key, surface_key + b'\x00',
                    b'\x00' * 8 + b'\x2f\x10'):
            with self.subTest(key=key):
                self.assertIsNone(bedrock.keys.decode_subchunk_key(key))


class RecordTagTest(unittest.TestCase):
    """Test naming the tag of a key."""

    def test_known_tags(self):
        """Test that column keys' tags are named."""
        column = ColumnCoordinate(7, 7)
        self.assertIs(bedrock.keys.record_tag(
            bedrock.keys.encode_surface_key(column)), RecordTag.DATA_2D)
        self.assertIs(bedrock.keys.record_tag(
            bedrock.keys.encode_subchunk_key(column, 3)),
            RecordTag.SUBCHUNK_PREFIX)

    def test_unknown(self):
        """Test that unknown tags and other keys give None."""
        self.assertIsNone(bedrock.keys.record_tag(b'\x00' * 8 + b'\x01'))
        self.assertIsNone(bedrock.keys.record_tag(b'~local_player'))


if __name__ == '__main__':
    unittest.main()
