#!/usr/bin/python3

"""Read terrain from the LevelDB records of a voxel world.

Records are read from a store object (see bedrock.store) and decoded into
namedtuples: SurfaceRecord for a column's height map and biomes, and
SubChunkRecord for each 16x16x16 block volume stacked in the column. Writing
records is not supported.

The keys submodule builds record keys, decode parses record values, and world
ties both together: list_columns, get_surface, get_subchunks and read_chunks
are the usual entry points.
"""

from bedrock.common import (
    Block,
    ColumnCoordinate,
    PaletteBlob,
    SubChunkRecord,
    SurfacePoint,
    SurfaceRecord,
)
from bedrock.decode import (
    SubChunkDecoder,
    SubChunk8Decoder,
    SurfaceDecoder,
    decode_subchunk,
    decode_surface,
    iter_blocks,
    iter_points,
)
from bedrock.errors import (
    DecodeError,
    InvalidIndex,
    TruncatedRecord,
    UnsupportedBitWidth,
    UnsupportedVersion,
)
from bedrock.keys import (
    RecordTag,
    decode_subchunk_key,
    decode_surface_key,
    encode_subchunk_key,
    encode_surface_key,
)
from bedrock.store import DumpDirectoryStore, MappingStore, dump_record
from bedrock.world import (
    ChunkData,
    get_subchunks,
    get_surface,
    list_columns,
    read_chunks,
)

__all__ = [
    'Block',
    'ColumnCoordinate',
    'PaletteBlob',
    'SubChunkRecord',
    'SurfacePoint',
    'SurfaceRecord',
    'SubChunkDecoder',
    'SubChunk8Decoder',
    'SurfaceDecoder',
    'decode_subchunk',
    'decode_surface',
    'iter_blocks',
    'iter_points',
    'DecodeError',
    'InvalidIndex',
    'TruncatedRecord',
    'UnsupportedBitWidth',
    'UnsupportedVersion',
    'RecordTag',
    'decode_subchunk_key',
    'decode_surface_key',
    'encode_subchunk_key',
    'encode_surface_key',
    'DumpDirectoryStore',
    'MappingStore',
    'dump_record',
    'ChunkData',
    'get_subchunks',
    'get_surface',
    'list_columns',
    'read_chunks',
]
