#!/usr/bin/python3

"""Find columns in a world's store and decode their records.

All functions take the store as their first argument; see bedrock.store for
what a store has to provide. Nothing is cached between calls.
"""

import logging
from collections import namedtuple

from bedrock.common import MAX_SUBCHUNKS
from bedrock.decode import decode_subchunk, decode_surface
from bedrock.errors import DecodeError
from bedrock.keys import (
    decode_surface_key,
    encode_subchunk_key,
    encode_surface_key,
    record_tag,
)

logger = logging.getLogger(__name__)

ChunkData = namedtuple('ChunkData', 'column surface subchunks errors')


def list_columns(store):
    """Generate the coordinates of every column that has a surface record.

    Columns come in the store's key order, which is not sorted by
    coordinates. Keys of other records are skipped.
    """
    for key, _ in store:
        column = decode_surface_key(key)
        if column is None:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug('skipping key %s (%s)', key.hex(),
                             record_tag(key))
            continue
        yield column


def get_surface(store, column, on_record=None):
    """Decode a column's surface record, or return None if it has none.

    If given, on_record(key, value) is called with the raw record before it
    is decoded.
    """
    key = encode_surface_key(column)
    value = store.get(key)
    if value is None:
        return None
    if on_record is not None:
        on_record(key, value)
    return decode_surface(value, column)


def get_subchunks(store, column, on_record=None):
    """Decode all sub-chunks of a column, bottom to top.

    Indices that have no record are left out of the returned list; a record
    that is present but malformed raises a DecodeError. If given,
    on_record(key, value) is called with each raw record before it is decoded.
    """
    subchunks = []
    for index in range(MAX_SUBCHUNKS):
        key = encode_subchunk_key(column, index)
        value = store.get(key)
        if value is None:
            continue
        if on_record is not None:
            on_record(key, value)
        subchunks.append(decode_subchunk(value, column, index))
    return subchunks


def _log_error(err):
    logger.warning('skipping malformed record: %s', err)


def read_chunks(store, columns=None, on_error=None, on_record=None):
    """Decode the surface and sub-chunks of many columns.

    Generates one ChunkData per column, for every column list_columns finds
    unless columns is given. A malformed record does not stop the others from
    being decoded: its DecodeError is appended to the ChunkData's errors and
    passed to on_error, which may re-raise it to abort the whole batch. By
    default, errors are logged as warnings. surface is None if the surface
    record is missing or malformed.

    on_record is passed on as in get_surface and get_subchunks.
    """
    if on_error is None:
        on_error = _log_error
    if columns is None:
        columns = list_columns(store)
    for column in columns:
        errors, surface, subchunks = [], None, []
        try:
            surface = get_surface(store, column, on_record)
        except DecodeError as err:
            errors.append(err)
            on_error(err)
        for index in range(MAX_SUBCHUNKS):
            key = encode_subchunk_key(column, index)
            value = store.get(key)
            if value is None:
                continue
            if on_record is not None:
                on_record(key, value)
            try:
                subchunks.append(decode_subchunk(value, column, index))
            except DecodeError as err:
                errors.append(err)
                on_error(err)
        yield ChunkData(column, surface, subchunks, errors)
