#!/usr/bin/python3

"""Decode surface and sub-chunk records read from a world's LevelDB.

A surface record is a fixed-size blob: 256 little-endian int16 heights
followed by 256 signed biome id bytes, one of each per (x, z) position of the
column, x varying fastest. Bytes after the first 768 are ignored.

A sub-chunk record starts with a version byte which decides how the rest is
laid out. Only version 8 is understood:

    version:1  storage_groups:1  bits_per_block_pair:1
    block words: ceil(4096 / blocks_per_word) little-endian uint32
    palette length:1  reserved:3  palette payload: rest of the record

Block ids are packed into 32-bit words, blocks_per_word = 32 // bits per
block of them per word, starting at the least significant bit. A word's high
bits that cannot hold another whole block are padding. Blocks within the
sub-chunk are ordered x, z, y with y varying fastest. Each id is an index into
the palette stored after the block words, which is handed on undecoded.

Have a look at SubChunkDecoder's docstring for adding other versions.
"""

import logging
from abc import ABCMeta, abstractmethod
from array import array
from collections import namedtuple
from struct import Struct

from bedrock.common import (
    BLOCKS_PER_SUBCHUNK,
    CHUNK_WIDTH,
    SUBCHUNK_HEIGHT,
    SURFACE_POINTS,
    Block,
    PaletteBlob,
    SubChunkRecord,
    SurfacePoint,
    SurfaceRecord,
    extract_bits,
)
from bedrock.errors import (
    DecodeError,
    TruncatedRecord,
    UnsupportedBitWidth,
    UnsupportedVersion,
)

logger = logging.getLogger(__name__)

WORD_BITS = 32
WordLayout = namedtuple('WordLayout', 'bits_per_block blocks_per_word '
                                      'word_count byte_length')
_word_struct = Struct('<I')


def word_layout(bits_per_block):
    """Describe how a sub-chunk's blocks are packed into 32-bit words.

    >>> word_layout(5)
    WordLayout(bits_per_block=5, blocks_per_word=6, word_count=683, byte_length=2732)
    """
    if not 0 < bits_per_block <= WORD_BITS:
        raise ValueError('cannot pack {}-bit blocks into {}-bit words'
                         .format(bits_per_block, WORD_BITS))
    blocks_per_word = WORD_BITS // bits_per_block
    word_count = -(-BLOCKS_PER_SUBCHUNK // blocks_per_word)
    return WordLayout(bits_per_block, blocks_per_word, word_count,
                      word_count * _word_struct.size)


def unpack_words(data, bits_per_block):
    """Unpack a sub-chunk's 4096 palette indices from its block words.

    data must hold at least word_layout(bits_per_block).byte_length bytes;
    anything after that is not looked at. Returns an array('B').
    """
    layout = word_layout(bits_per_block)
    if len(data) < layout.byte_length:
        raise TruncatedRecord('block words', layout.byte_length, len(data))
    offsets = range(0, layout.blocks_per_word * bits_per_block,
                    bits_per_block)
    blocks = array('B')
    for word, in _word_struct.iter_unpack(data[:layout.byte_length]):
        blocks.extend(extract_bits(word, bits_per_block, offset)
                      for offset in offsets)
    # The last word is only partly used unless blocks_per_word divides 4096.
    del blocks[BLOCKS_PER_SUBCHUNK:]
    return blocks


class SurfaceDecoder:
    """Decoder for a column's surface record (height map and biome ids)."""

    _heights_struct, _biomes_struct = map(
        Struct, ['<{}h'.format(SURFACE_POINTS), '<{}b'.format(SURFACE_POINTS)])

    @property
    def record_size(self):
        """The number of bytes of a surface record that are decoded."""
        return self._heights_struct.size + self._biomes_struct.size

    def decode(self, data, column=None):
        """Parse a surface record, returning a SurfaceRecord."""
        if len(data) < self.record_size:
            raise TruncatedRecord('surface record', self.record_size,
                                  len(data), column)
        if len(data) > self.record_size:
            logger.debug('ignoring %d trailing bytes of surface record',
                         len(data) - self.record_size)
        heights = self._heights_struct.unpack_from(data)
        biomes = self._biomes_struct.unpack_from(
            data, self._heights_struct.size)
        return SurfaceRecord(array('h', heights), array('b', biomes))


class SubChunkDecoder(metaclass=ABCMeta):
    """The base class for sub-chunk record decoders.

    There is one subclass per sub-chunk format version. A subclass sets
    VERSION to the version byte it understands and implements parse_record.
    To support a new version, write a new subclass and add it to
    SUBCHUNK_DECODERS; decode_subchunk picks the decoder by version byte.

    Errors raised from parse_record do not need to know which record is being
    decoded: decode fills in the column and index before passing them on.
    """

    VERSION = NotImplemented

    def decode(self, data, column=None, index=None):
        """Parse a sub-chunk record, returning a SubChunkRecord.

        column and index are only used to identify the record in log
        messages, errors and the returned record.
        """
        if not data:
            raise TruncatedRecord('sub-chunk version', 1, 0, column, index)
        if data[0] != self.VERSION:
            raise UnsupportedVersion(data[0], column, index)
        try:
            return self.parse_record(data, index)
        except DecodeError as err:
            raise err.locate(column, index)

    @staticmethod
    def _read(data, offset, size, what):
        """Return size bytes of data at offset, or raise TruncatedRecord."""
        available = max(len(data) - offset, 0)
        if available < size:
            raise TruncatedRecord(what, size, available)
        return data[offset:offset + size]

    @abstractmethod
    def parse_record(self, data, index):
        """Parse a whole record (including its version byte)."""
        return NotImplemented


class SubChunk8Decoder(SubChunkDecoder):
    """Decoder for version 8 sub-chunks: word-packed blocks and a palette."""

    VERSION = 8
    BITS_PER_BLOCK_PAIR = 6, 8, 10, 12
    _header_struct, _palette_header_struct = map(Struct, ['<BBB', '<B3s'])

    def parse_record(self, data, index):
        """Parse a version 8 sub-chunk record."""
        offset = 0
        version, storage_groups, bits_per_block_pair = \
            self._header_struct.unpack(self._read(
                data, offset, self._header_struct.size, 'sub-chunk header'))
        offset += self._header_struct.size
        logger.debug('sub-chunk %s: version %d, %d bytes, %d storage groups, '
                     '%d bits per block pair', index, version, len(data),
                     storage_groups, bits_per_block_pair)
        # An odd field value must not be rounded down to a supported width.
        if bits_per_block_pair not in self.BITS_PER_BLOCK_PAIR:
            raise UnsupportedBitWidth(bits_per_block_pair)
        bits_per_block = bits_per_block_pair // 2

        layout = word_layout(bits_per_block)
        raw_blocks = bytes(self._read(data, offset, layout.byte_length,
                                      'block words'))
        blocks = unpack_words(raw_blocks, bits_per_block)
        offset += layout.byte_length

        length, reserved = self._palette_header_struct.unpack(self._read(
            data, offset, self._palette_header_struct.size, 'palette header'))
        offset += self._palette_header_struct.size
        palette = PaletteBlob(length, reserved, bytes(data[offset:]))
        logger.debug('sub-chunk %s: palette length field %d, %d payload bytes',
                     index, length, len(palette.payload))

        return SubChunkRecord(index, version, storage_groups, bits_per_block,
                              blocks, raw_blocks, palette)


SUBCHUNK_DECODERS = SubChunk8Decoder,


def decode_surface(data, column=None):
    """Parse a surface record, returning a SurfaceRecord."""
    return SurfaceDecoder().decode(data, column)


def decode_subchunk(data, column=None, index=None):
    """Parse a sub-chunk record with the decoder for its version byte."""
    if not data:
        raise TruncatedRecord('sub-chunk version', 1, 0, column, index)
    for decoder_type in SUBCHUNK_DECODERS:
        if data[0] == decoder_type.VERSION:
            return decoder_type().decode(data, column, index)
    raise UnsupportedVersion(data[0], column, index)


def iter_points(column, record):
    """Generate a column's SurfacePoints in world block coordinates."""
    w = CHUNK_WIDTH
    for i, (height, biome) in enumerate(zip(record.heights, record.biomes)):
        yield SurfacePoint(i % w + column.x*w, i // w + column.z*w,
                           height, biome)


def iter_blocks(column, record):
    """Generate a sub-chunk's Blocks in world block coordinates.

    A record decoded without an index is placed at the bottom of the column.
    """
    w, h = CHUNK_WIDTH, SUBCHUNK_HEIGHT
    y0 = (record.index or 0) * h
    for i, palette_index in enumerate(record.blocks):
        yield Block(i//h//w + column.x*w, i % h + y0,
                    (i//h) % w + column.z*w, palette_index)
