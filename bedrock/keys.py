#!/usr/bin/python3

"""Build and recognise the keys of column records.

Every per-column record in a world's LevelDB is keyed by the column's x and z
coordinates (little-endian signed 32-bit integers), followed by a one-byte tag
naming the kind of record. Sub-chunk records append one more byte: the
sub-chunk's index in the column, counting from the bottom.

    surface key:    <x:4><z:4><45>              (9 bytes)
    sub-chunk key:  <x:4><z:4><47><index:1>     (10 bytes)

Keys are plain bytes; nothing here touches a store.
"""

from enum import IntEnum
from struct import Struct, error as StructError

from bedrock.common import MAX_SUBCHUNKS, ColumnCoordinate
from bedrock.errors import InvalidIndex


class RecordTag(IntEnum):
    """The tag byte following the column coordinates in a record key."""

    DATA_2D = 45
    DATA_2D_LEGACY = 46
    SUBCHUNK_PREFIX = 47
    LEGACY_TERRAIN = 48
    BLOCK_ENTITY = 49
    ENTITY = 50
    PENDING_TICKS = 51
    BLOCK_EXTRA_DATA = 52
    BIOME_STATE = 53
    FINALIZED_STATE = 54
    VERSION = 118


SURFACE_TAG = RecordTag.DATA_2D
SUBCHUNK_TAG = RecordTag.SUBCHUNK_PREFIX

_surface_key_struct, _subchunk_key_struct = map(Struct, ['<iiB', '<iiBB'])
SURFACE_KEY_SIZE = _surface_key_struct.size
SUBCHUNK_KEY_SIZE = _subchunk_key_struct.size


def encode_surface_key(column):
    """Return the key of a column's surface (height map and biomes) record."""
    x, z = column
    try:
        return _surface_key_struct.pack(x, z, SURFACE_TAG)
    except StructError as err:
        raise ValueError('column ({}, {}) out of range: {}'
                         .format(x, z, err)) from err


def encode_subchunk_key(column, index):
    """Return the key of sub-chunk number index (0..15) of a column."""
    if not isinstance(index, int) or not 0 <= index < MAX_SUBCHUNKS:
        raise InvalidIndex(index, column)
    x, z = column
    try:
        return _subchunk_key_struct.pack(x, z, SUBCHUNK_TAG, index)
    except StructError as err:
        raise ValueError('column ({}, {}) out of range: {}'
                         .format(x, z, err)) from err


def decode_surface_key(key):
    """Return the ColumnCoordinate of a surface key, or None.

    None is returned for anything that is not exactly a surface key: keys of
    another length and 9-byte keys carrying another tag. This makes the
    function usable as a filter while scanning a store's whole key space.
    """
    if len(key) != SURFACE_KEY_SIZE:
        return None
    x, z, tag = _surface_key_struct.unpack(key)
    if tag != SURFACE_TAG:
        return None
    return ColumnCoordinate(x, z)


def decode_subchunk_key(key):
    """Return (ColumnCoordinate, index) for a sub-chunk key, or None."""
    if len(key) != SUBCHUNK_KEY_SIZE:
        return None
    x, z, tag, index = _subchunk_key_struct.unpack(key)
    if tag != SUBCHUNK_TAG or index >= MAX_SUBCHUNKS:
        return None
    return ColumnCoordinate(x, z), index


def record_tag(key):
    """Name the tag of a 9- or 10-byte column key.

    Returns None for keys of other lengths (e.g. the store's string-keyed
    global records) and for tags that are not known.
    """
    if len(key) not in (SURFACE_KEY_SIZE, SUBCHUNK_KEY_SIZE):
        return None
    try:
        return RecordTag(key[8])
    except ValueError:
        return None
