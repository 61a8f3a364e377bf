#!/usr/bin/python3

"""Common types and utilities for the bedrock submodules."""

from collections import namedtuple

# A column is CHUNK_WIDTH blocks wide in x and z; each of its sub-chunks is
# SUBCHUNK_HEIGHT blocks tall.
CHUNK_WIDTH = SUBCHUNK_HEIGHT = 16
MAX_SUBCHUNKS = 16
BLOCKS_PER_SUBCHUNK = CHUNK_WIDTH * CHUNK_WIDTH * SUBCHUNK_HEIGHT
SURFACE_POINTS = CHUNK_WIDTH * CHUNK_WIDTH

ColumnCoordinate = namedtuple('ColumnCoordinate', 'x z')
SurfaceRecord = namedtuple('SurfaceRecord', 'heights biomes')
SubChunkRecord = namedtuple('SubChunkRecord', 'index version storage_groups '
                                              'bits_per_block blocks '
                                              'raw_blocks palette')
PaletteBlob = namedtuple('PaletteBlob', 'length reserved payload')

Block = namedtuple('Block', 'x y z palette_index')
SurfacePoint = namedtuple('SurfacePoint', 'x z height biome')


def extract_bits(n, n_bits, offset_from_lsb):
    """Extract a number of bits from an integer.

    Example:
    >>> bin(extract_bits(0b1101011001111010, n_bits=5, offset_from_lsb=7))
    '0b1100'

        0b1101011001111010 -> 0b01100
              ^^^^^<- 7 ->

    The bits marked with ^ will be extracted. The offset is counted from the
    LSB, with the LSB itself having the offset 0.
    """
    if n_bits < 0 or offset_from_lsb < 0:
        raise ValueError('cannot extract {} bits at offset {}'
                         .format(n_bits, offset_from_lsb))
    return (n >> offset_from_lsb) & ((1 << n_bits) - 1)
